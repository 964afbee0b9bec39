import logger

from .locator import locate_candidates, locate_structure
from .normalizer import normalize_text
from .parsing import strict_loads
from .strategies import StrategyContext, run_strategy_chain
from .truncation import assess_truncation
from .types import (
    Complete,
    Diagnostic,
    ErrorKind,
    ExtractionResult,
    Failed,
    FinishReason,
    RawCompletionText,
    Recovered,
)

DEFAULT_EXCERPT_CHARS = 300
_EXCERPT_GAP = "\n[...]\n"


def build_excerpt(text: str, excerpt_chars: int = DEFAULT_EXCERPT_CHARS) -> str:
    excerpt_chars = max(1, excerpt_chars)
    if len(text) <= excerpt_chars * 2:
        return text
    return f"{text[:excerpt_chars]}{_EXCERPT_GAP}{text[-excerpt_chars:]}"


def _failed(kind: ErrorKind, message: str, text: str, excerpt_chars: int, truncated: bool = False) -> Failed:
    logger.saveToLog(f"[extract_structured] failed kind={kind.value}: {message}", "DEBUG")
    return Failed(Diagnostic(kind=kind, message=message, excerpt=build_excerpt(text, excerpt_chars), truncated=truncated))


def extract_structured(
    raw: RawCompletionText,
    *,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> ExtractionResult:
    text = normalize_text(raw.text or "")

    direct = strict_loads(text)
    if direct.ok:
        return Complete(direct.value)

    candidate = locate_structure(text)
    if candidate is None:
        return _failed(ErrorKind.no_structure_found, "No '[' or '{' found in completion text", text, excerpt_chars)

    candidate_attempt = None
    for located in locate_candidates(text):
        attempt = strict_loads(text[located.start:located.end])
        if attempt.ok:
            logger.saveToLog(
                f"[extract_structured] parsed {located.kind.value} after trimming surrounding text "
                f"span=({located.start},{located.end})",
                "DEBUG",
            )
            return Complete(attempt.value, trimmed=True)
        if located == candidate:
            candidate_attempt = attempt

    assessment = assess_truncation(raw.finish_reason, candidate)
    logger.saveToLog(
        f"[extract_structured] candidate kind={candidate.kind.value} balanced={candidate.balanced} "
        f"truncation={assessment.describe()}",
        "DEBUG",
    )

    outcome = run_strategy_chain(StrategyContext(text=text, candidate=candidate, truncated=assessment.flagged))
    if outcome is not None:
        return Recovered(outcome.value, outcome.warnings)

    if assessment.flagged:
        return _failed(
            ErrorKind.unbalanced_unrecoverable,
            f"Output looks truncated ({assessment.describe()}) and no complete element could be recovered",
            text,
            excerpt_chars,
            truncated=True,
        )
    if candidate_attempt is not None and candidate_attempt.syntax_error:
        message = candidate_attempt.error
        if candidate_attempt.position is not None:
            message = f"{message} at offset {candidate.start + candidate_attempt.position}"
        return _failed(
            ErrorKind.strict_parse_error,
            message,
            text,
            excerpt_chars,
        )
    return _failed(ErrorKind.all_strategies_exhausted, "No fallback strategy produced valid JSON", text, excerpt_chars)


def extract_json(
    text: str,
    finish_reason: FinishReason | str | None = FinishReason.stop,
    *,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> ExtractionResult:
    raw = RawCompletionText(text=text or "", finish_reason=FinishReason.coerce(finish_reason))
    return extract_structured(raw, excerpt_chars=excerpt_chars)
