"""Ordered fallback strategies for text that failed a strict parse.

Each strategy is a pure function of a ``StrategyContext`` and returns a
``RecoveredValue`` or None. They scan characters explicitly instead of using
regular expressions so the cost stays bounded on adversarial model output.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Callable

import logger

from .parsing import strict_loads
from .recovery import recover_partial
from .scanning import CLOSERS
from .types import Candidate, RecoveryWarning


@dataclass(frozen=True)
class StrategyContext:
    text: str
    candidate: Candidate | None
    truncated: bool


@dataclass(frozen=True)
class RecoveredValue:
    value: Any
    warnings: tuple[RecoveryWarning, ...]


@dataclass(frozen=True)
class Strategy:
    name: str
    run: Callable[[StrategyContext], RecoveredValue | None]


@dataclass(frozen=True)
class ChainOutcome:
    value: Any
    warnings: tuple[RecoveryWarning, ...]
    strategy: str


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _skip_whitespace_back(text: str, index: int) -> int:
    while index >= 0 and text[index].isspace():
        index -= 1
    return index


def _first_opener(text: str) -> int:
    positions = [position for position in (text.find("["), text.find("{")) if position != -1]
    return min(positions) if positions else -1


def _last_closer(text: str) -> int:
    return max(text.rfind("]"), text.rfind("}"))


def truncation_recovery(context: StrategyContext) -> RecoveredValue | None:
    if not context.truncated or context.candidate is None:
        return None
    value = recover_partial(context.text, context.candidate)
    if value is None:
        return None
    return RecoveredValue(value, (RecoveryWarning.truncation_fixed,))


def _array_pattern_spans(text: str) -> list[tuple[int, int]]:
    # starts: "[" then optional whitespace then "{"; ends: "}" then optional whitespace then "]"
    starts: list[tuple[int, int]] = []
    ends: list[int] = []
    brace_positions: list[int] = []
    for index, ch in enumerate(text):
        if ch == "[":
            brace = _skip_whitespace(text, index + 1)
            if brace < len(text) and text[brace] == "{":
                starts.append((index, brace))
        elif ch == "]":
            brace = _skip_whitespace_back(text, index - 1)
            if brace >= 0 and text[brace] == "}":
                ends.append(index + 1)
                brace_positions.append(brace)
    if not starts or not ends:
        return []

    spans: set[tuple[int, int]] = set()
    cursor = 0
    for start, brace in starts:
        if start < cursor:
            continue
        # non-greedy: the first closing "}" must come after the opening "{"
        position = bisect_right(brace_positions, brace)
        if position == len(ends):
            break
        spans.add((start, ends[position]))
        cursor = ends[position]

    first_start, first_brace = starts[0]
    if brace_positions[-1] > first_brace:
        spans.add((first_start, ends[-1]))
    return sorted(spans, key=lambda span: (span[0], -(span[1] - span[0])))


def array_pattern_extraction(context: StrategyContext) -> RecoveredValue | None:
    for start, end in _array_pattern_spans(context.text):
        attempt = strict_loads(context.text[start:end])
        if attempt.is_container:
            return RecoveredValue(attempt.value, (RecoveryWarning.array_pattern_extracted,))
    return None


def first_object_extraction(context: StrategyContext) -> RecoveredValue | None:
    start = context.text.find("{")
    if start == -1:
        return None
    end = context.text.find("}", start)
    if end == -1:
        return None
    attempt = strict_loads(context.text[start:end + 1])
    if attempt.is_container:
        return RecoveredValue(attempt.value, (RecoveryWarning.first_object_extracted,))
    return None


def _string_end(text: str, start: int, quote: str) -> int:
    index = start + 1
    escaped = False
    while index < len(text):
        ch = text[index]
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == quote:
            return index + 1
        index += 1
    return len(text)


def _requote(body: str) -> str:
    chars: list[str] = []
    index = 0
    while index < len(body):
        ch = body[index]
        if ch == "\\" and index + 1 < len(body):
            following = body[index + 1]
            chars.append("'" if following == "'" else ch + following)
            index += 2
            continue
        chars.append('\\"' if ch == '"' else ch)
        index += 1
    return "".join(chars)


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def normalize_syntax(text: str) -> tuple[str, tuple[RecoveryWarning, ...]]:
    """Drop trailing commas, quote bare keys and turn single quotes into double quotes."""
    out: list[str] = []
    last_significant = -1
    removed_comma = quoted_keys = normalized_quotes = False

    def emit(chunk: str):
        nonlocal last_significant
        out.append(chunk)
        if chunk.strip():
            last_significant = len(out) - 1

    def previous_significant_char() -> str:
        return out[last_significant].rstrip()[-1:] if last_significant >= 0 else ""

    index = 0
    while index < len(text):
        ch = text[index]
        if ch == '"':
            end = _string_end(text, index, '"')
            emit(text[index:end])
            index = end
        elif ch == "'":
            end = _string_end(text, index, "'")
            closed = end - index >= 2 and text[end - 1] == "'"
            body = text[index + 1:end - 1] if closed else text[index + 1:end]
            emit('"' + _requote(body) + '"')
            normalized_quotes = True
            index = end
        elif ch in CLOSERS:
            if previous_significant_char() == ",":
                out[last_significant] = out[last_significant].rstrip()[:-1]
                removed_comma = True
            emit(ch)
            index += 1
        elif _is_identifier_start(ch):
            end = index + 1
            while end < len(text) and _is_identifier_char(text[end]):
                end += 1
            word = text[index:end]
            after = _skip_whitespace(text, end)
            if after < len(text) and text[after] == ":" and previous_significant_char() in ("{", ","):
                emit(f'"{word}"')
                quoted_keys = True
            else:
                emit(word)
            index = end
        else:
            emit(ch)
            index += 1

    warnings = []
    if removed_comma:
        warnings.append(RecoveryWarning.trailing_comma_removed)
    if quoted_keys:
        warnings.append(RecoveryWarning.keys_quoted)
    if normalized_quotes:
        warnings.append(RecoveryWarning.quote_normalized)
    return "".join(out), tuple(warnings)


def syntax_normalization(context: StrategyContext) -> RecoveredValue | None:
    regions: list[str] = []
    start = _first_opener(context.text)
    end = _last_closer(context.text)
    if start != -1 and end > start:
        regions.append(context.text[start:end + 1])
    if context.candidate is not None:
        candidate_text = context.text[context.candidate.start:context.candidate.end]
        if candidate_text not in regions:
            regions.append(candidate_text)

    for region in regions:
        repaired, warnings = normalize_syntax(region)
        if not warnings:
            continue
        attempt = strict_loads(repaired)
        if attempt.is_container:
            return RecoveredValue(attempt.value, warnings)
    return None


def suffix_trimming(context: StrategyContext) -> RecoveredValue | None:
    text = context.text
    start = _first_opener(text)
    if start == -1:
        return None
    limit = len(text)
    for end in range(len(text) - 1, start, -1):
        if text[end] not in CLOSERS or end >= limit:
            continue
        attempt = strict_loads(text[start:end + 1])
        if attempt.is_container:
            return RecoveredValue(attempt.value, (RecoveryWarning.suffix_trimmed,))
        if attempt.position is None:
            # nesting too deep to decode; shorter prefixes share the same nesting
            return None
        # shorter prefixes that still contain the failing position fail the same way
        limit = min(end, start + attempt.position)
    return None


STRATEGIES: tuple[Strategy, ...] = (
    Strategy("truncation_recovery", truncation_recovery),
    Strategy("array_pattern", array_pattern_extraction),
    Strategy("first_object", first_object_extraction),
    Strategy("syntax_normalization", syntax_normalization),
    Strategy("suffix_trimming", suffix_trimming),
)


def run_strategy_chain(
    context: StrategyContext,
    strategies: tuple[Strategy, ...] = STRATEGIES,
) -> ChainOutcome | None:
    for position, strategy in enumerate(strategies, start=1):
        recovered = strategy.run(context)
        if recovered is None:
            logger.saveToLog(f"[run_strategy_chain] strategy {position} ({strategy.name}) did not apply", "DEBUG")
            continue
        if not isinstance(recovered.value, (list, dict)):
            continue
        logger.saveToLog(
            f"[run_strategy_chain] strategy {position} ({strategy.name}) succeeded "
            f"warnings={[warning.value for warning in recovered.warnings]}",
            "DEBUG",
        )
        return ChainOutcome(recovered.value, recovered.warnings, strategy.name)
    return None
