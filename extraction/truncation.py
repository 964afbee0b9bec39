from dataclasses import dataclass

from .types import Candidate, FinishReason


@dataclass(frozen=True)
class TruncationAssessment:
    by_finish_reason: bool
    by_balance: bool

    @property
    def flagged(self) -> bool:
        return self.by_finish_reason or self.by_balance

    def describe(self) -> str:
        reasons = []
        if self.by_finish_reason:
            reasons.append("finish_reason")
        if self.by_balance:
            reasons.append("unbalanced")
        return ",".join(reasons) or "none"


def assess_truncation(finish_reason: FinishReason, candidate: Candidate | None) -> TruncationAssessment:
    return TruncationAssessment(
        by_finish_reason=FinishReason.coerce(finish_reason) != FinishReason.stop,
        by_balance=candidate is not None and not candidate.balanced,
    )
