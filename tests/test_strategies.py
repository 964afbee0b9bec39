import json

from extraction import RecoveryWarning, StrategyContext, locate_structure, run_strategy_chain
from extraction.strategies import (
    RecoveredValue,
    Strategy,
    array_pattern_extraction,
    first_object_extraction,
    normalize_syntax,
    suffix_trimming,
    syntax_normalization,
    truncation_recovery,
)


def _context(text: str, truncated: bool = False) -> StrategyContext:
    return StrategyContext(text=text, candidate=locate_structure(text), truncated=truncated)


def test_truncation_recovery_only_runs_when_flagged():
    text = '[{"a":1},{"b":'
    assert truncation_recovery(_context(text, truncated=False)) is None
    recovered = truncation_recovery(_context(text, truncated=True))
    assert recovered == RecoveredValue([{"a": 1}], (RecoveryWarning.truncation_fixed,))


def test_array_pattern_skips_non_object_arrays():
    recovered = array_pattern_extraction(_context('Intro [1] then [{"a": 1}] tail]'))
    assert recovered.value == [{"a": 1}]
    assert recovered.warnings == (RecoveryWarning.array_pattern_extracted,)


def test_array_pattern_falls_back_from_greedy_to_first_match():
    recovered = array_pattern_extraction(_context('[{"a":1}] and [{"b":2}]'))
    assert recovered.value == [{"a": 1}]


def test_array_pattern_prefers_greedy_span_for_nested_arrays():
    recovered = array_pattern_extraction(_context('x [{"a":[{"b":1}]}] y'))
    assert recovered.value == [{"a": [{"b": 1}]}]


def test_first_object_extraction():
    recovered = first_object_extraction(_context('noise {"a": 1} more {"b": 2}'))
    assert recovered.value == {"a": 1}
    assert recovered.warnings == (RecoveryWarning.first_object_extracted,)


def test_first_object_extraction_is_non_greedy():
    assert first_object_extraction(_context('{"a": {"b": 1}}')) is None


def test_normalize_syntax_fixes_commas_keys_and_quotes():
    repaired, warnings = normalize_syntax("{'a': 'it\\'s', b: [1, 2,],}")
    assert json.loads(repaired) == {"a": "it's", "b": [1, 2]}
    assert warnings == (
        RecoveryWarning.trailing_comma_removed,
        RecoveryWarning.keys_quoted,
        RecoveryWarning.quote_normalized,
    )


def test_normalize_syntax_escapes_double_quotes_inside_single_quoted_values():
    repaired, _ = normalize_syntax("""{"a": 'say "hi"'}""")
    assert json.loads(repaired) == {"a": 'say "hi"'}


def test_normalize_syntax_leaves_string_contents_alone():
    text = '{"a": ",]", "b": "key: value,}"}'
    assert normalize_syntax(text) == (text, ())


def test_syntax_normalization_uses_outermost_span():
    recovered = syntax_normalization(_context('Result: {rows: [{"n": 1,},], total: 1} thanks'))
    assert recovered.value == {"rows": [{"n": 1}], "total": 1}


def test_suffix_trimming_drops_trailing_garbage():
    recovered = suffix_trimming(_context('[{"a": 1}] trailing ] junk }'))
    assert recovered.value == [{"a": 1}]
    assert recovered.warnings == (RecoveryWarning.suffix_trimmed,)


def test_suffix_trimming_without_brackets():
    assert suffix_trimming(_context("nothing here")) is None


def test_chain_stops_at_first_success():
    calls = []

    def record(name, result):
        def run(context):
            calls.append(name)
            return result
        return Strategy(name, run)

    outcome = run_strategy_chain(
        _context("[]"),
        (
            record("first", None),
            record("second", RecoveredValue([1], (RecoveryWarning.suffix_trimmed,))),
            record("third", RecoveredValue([2], ())),
        ),
    )
    assert calls == ["first", "second"]
    assert outcome.value == [1]
    assert outcome.strategy == "second"


def test_chain_rejects_scalar_roots():
    outcome = run_strategy_chain(
        _context("[]"),
        (
            Strategy("scalar", lambda context: RecoveredValue(5, ())),
            Strategy("array", lambda context: RecoveredValue([5], (RecoveryWarning.suffix_trimmed,))),
        ),
    )
    assert outcome.value == [5]
