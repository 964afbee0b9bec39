from dataclasses import dataclass
from enum import Enum
from typing import Any


class FinishReason(str, Enum):
    stop = "stop"
    length = "length"
    content_filter = "content_filter"
    other = "other"

    @classmethod
    def coerce(cls, value: "str | FinishReason | None") -> "FinishReason":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        if normalized == "max_tokens":
            return cls.length
        try:
            return cls(normalized)
        except ValueError:
            return cls.other


class StructureKind(str, Enum):
    array = "array"
    object = "object"


class RecoveryWarning(str, Enum):
    truncation_fixed = "TruncationFixed"
    array_pattern_extracted = "ArrayPatternExtracted"
    first_object_extracted = "FirstObjectExtracted"
    trailing_comma_removed = "TrailingCommaRemoved"
    keys_quoted = "KeysQuoted"
    quote_normalized = "QuoteNormalized"
    suffix_trimmed = "SuffixTrimmed"


class ErrorKind(str, Enum):
    no_structure_found = "NoStructureFound"
    unbalanced_unrecoverable = "UnbalancedUnrecoverable"
    strict_parse_error = "StrictParseError"
    all_strategies_exhausted = "AllStrategiesExhausted"


@dataclass(frozen=True)
class RawCompletionText:
    text: str
    finish_reason: FinishReason = FinishReason.stop


@dataclass(frozen=True)
class Candidate:
    """Located JSON root: ``text[start:end]`` with ``end`` exclusive."""

    start: int
    end: int
    kind: StructureKind
    balanced: bool


@dataclass(frozen=True)
class Diagnostic:
    kind: ErrorKind
    message: str
    excerpt: str
    truncated: bool = False

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "excerpt": self.excerpt,
            "truncated": self.truncated,
        }


@dataclass(frozen=True)
class Complete:
    value: Any
    trimmed: bool = False
    status = "complete"

    def to_dict(self) -> dict:
        return {"status": self.status, "value": self.value, "trimmed": self.trimmed, "warnings": []}


@dataclass(frozen=True)
class Recovered:
    value: Any
    warnings: tuple[RecoveryWarning, ...]
    status = "recovered"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "value": self.value,
            "warnings": [warning.value for warning in self.warnings],
        }


@dataclass(frozen=True)
class Failed:
    diagnostic: Diagnostic
    status = "failed"

    def to_dict(self) -> dict:
        return {"status": self.status, "error": self.diagnostic.to_dict()}


ExtractionResult = Complete | Recovered | Failed
