from .locator import locate_candidates, locate_structure
from .normalizer import normalize_text
from .orchestrator import build_excerpt, extract_json, extract_structured
from .recovery import recover_partial
from .strategies import STRATEGIES, StrategyContext, run_strategy_chain
from .truncation import assess_truncation
from .types import (
    Candidate,
    Complete,
    Diagnostic,
    ErrorKind,
    ExtractionResult,
    Failed,
    FinishReason,
    RawCompletionText,
    Recovered,
    RecoveryWarning,
    StructureKind,
)

__all__ = [
    "Candidate",
    "Complete",
    "Diagnostic",
    "ErrorKind",
    "ExtractionResult",
    "Failed",
    "FinishReason",
    "RawCompletionText",
    "Recovered",
    "RecoveryWarning",
    "STRATEGIES",
    "StrategyContext",
    "StructureKind",
    "assess_truncation",
    "build_excerpt",
    "extract_json",
    "extract_structured",
    "locate_candidates",
    "locate_structure",
    "normalize_text",
    "recover_partial",
    "run_strategy_chain",
]
