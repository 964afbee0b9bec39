import pytest

from extraction import Candidate, FinishReason, StructureKind, assess_truncation

BALANCED = Candidate(0, 4, StructureKind.array, True)
UNBALANCED = Candidate(0, 4, StructureKind.array, False)


def test_clean_stop_with_balanced_candidate_is_not_flagged():
    assert not assess_truncation(FinishReason.stop, BALANCED).flagged


@pytest.mark.parametrize("reason", [FinishReason.length, FinishReason.content_filter, FinishReason.other])
def test_any_reason_other_than_stop_is_flagged(reason):
    assessment = assess_truncation(reason, BALANCED)
    assert assessment.flagged
    assert assessment.by_finish_reason
    assert not assessment.by_balance


def test_unbalanced_candidate_is_flagged_even_on_stop():
    assessment = assess_truncation(FinishReason.stop, UNBALANCED)
    assert assessment.flagged
    assert assessment.describe() == "unbalanced"


def test_finish_reason_coercion():
    assert FinishReason.coerce(None) == FinishReason.other
    assert FinishReason.coerce("STOP") == FinishReason.stop
    assert FinishReason.coerce("max_tokens") == FinishReason.length
    assert FinishReason.coerce("tool_calls") == FinishReason.other
    assert FinishReason.coerce(FinishReason.length) == FinishReason.length
