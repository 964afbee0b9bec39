import json

import pytest

from extraction import (
    Complete,
    ErrorKind,
    Failed,
    FinishReason,
    RawCompletionText,
    Recovered,
    RecoveryWarning,
    build_excerpt,
    extract_json,
    extract_structured,
)


def test_clean_json_is_complete_without_trimming():
    result = extract_json('[{"a": 1}]')
    assert result == Complete([{"a": 1}])


def test_json_inside_prose_and_fences_is_complete():
    result = extract_json('Here is the json:\n```json\n[{"a":1}]\n```\nThanks')
    assert isinstance(result, Complete)
    assert result.value == [{"a": 1}]
    assert result.trimmed is True


def test_object_enclosing_an_array_is_returned_whole():
    result = extract_json('Sure! {"rows": [1, 2], "total": 2} Let me know.')
    assert result == Complete({"rows": [1, 2], "total": 2}, trimmed=True)


def test_bracket_inside_string_value_does_not_truncate_match():
    result = extract_json('Output: [{"note":"array is [done]"}] ok')
    assert isinstance(result, Complete)
    assert result.value == [{"note": "array is [done]"}]


def test_scalar_root_only_via_direct_parse():
    assert extract_json("42") == Complete(42)


def test_truncated_array_recovers_complete_elements_only():
    raw = RawCompletionText('[{"a":1},{"a":2},{"b":', FinishReason.length)
    result = extract_structured(raw)
    assert result == Recovered([{"a": 1}, {"a": 2}], (RecoveryWarning.truncation_fixed,))


def test_unbalanced_text_is_recovered_even_when_provider_says_stop():
    result = extract_json('[{"a":1},{"a":2},{"b":', "stop")
    assert isinstance(result, Recovered)
    assert result.warnings == (RecoveryWarning.truncation_fixed,)


def test_combined_defects_resolve_through_syntax_normalization():
    result = extract_json('Here is the data: {name: "Widget", "price": 3,}')
    assert result == Recovered(
        {"name": "Widget", "price": 3},
        (RecoveryWarning.trailing_comma_removed, RecoveryWarning.keys_quoted),
    )


def test_combined_defects_in_array_root():
    result = extract_json('[{name: "Widget", price: 3,},]')
    assert isinstance(result, Recovered)
    assert result.value == [{"name": "Widget", "price": 3}]
    assert RecoveryWarning.trailing_comma_removed in result.warnings


def test_no_structure_fails_fast():
    result = extract_json("I could not find any table in this page.")
    assert isinstance(result, Failed)
    assert result.diagnostic.kind == ErrorKind.no_structure_found


def test_truncation_failure_is_classified_as_unbalanced():
    result = extract_json('[{"State": "Johor", "Num', FinishReason.length)
    assert isinstance(result, Failed)
    assert result.diagnostic.kind == ErrorKind.unbalanced_unrecoverable
    assert result.diagnostic.truncated is True


def test_bad_escape_is_a_strict_parse_error():
    result = extract_json('{"a": "x\\q"}')
    assert isinstance(result, Failed)
    assert result.diagnostic.kind == ErrorKind.strict_parse_error


def test_non_finite_constants_are_rejected_as_syntax_errors():
    result = extract_json('[{"State": "Johor", "Number": NaN}]')
    assert isinstance(result, Failed)
    assert result.diagnostic.kind == ErrorKind.strict_parse_error
    assert "NaN" in result.diagnostic.message
    json.dumps(result.to_dict(), allow_nan=False)

    for token in ("Infinity", "-Infinity"):
        assert isinstance(extract_json(f'[{{"a": {token}}}]'), Failed)


def test_nan_inside_a_string_is_ordinary_text():
    assert extract_json('[{"note": "NaN"}]') == Complete([{"note": "NaN"}])


def test_truncation_recovery_stops_before_a_non_finite_element():
    raw = RawCompletionText('[{"a":1},{"a":NaN},{"b":', FinishReason.length)
    assert extract_structured(raw) == Recovered([{"a": 1}], (RecoveryWarning.truncation_fixed,))


def test_standalone_object_before_the_records_array_is_not_the_root():
    result = extract_json('Page {"page": 3} rows: [{"a": 1}]')
    assert result == Complete([{"a": 1}], trimmed=True)


def test_undecodable_nesting_exhausts_all_strategies():
    result = extract_json("[" * 100_000 + "]" * 100_000)
    assert isinstance(result, Failed)
    assert result.diagnostic.kind == ErrorKind.all_strategies_exhausted


def test_diagnostic_excerpt_is_bounded_for_large_input():
    text = "{" + "a" * 50_000 + "}"
    result = extract_json(text)
    assert isinstance(result, Failed)
    excerpt = result.diagnostic.excerpt
    assert len(excerpt) <= 620
    assert excerpt.startswith("{aaa")
    assert excerpt.endswith("aaa}")


def test_short_excerpt_is_the_whole_text():
    assert build_excerpt("short") == "short"


@pytest.mark.parametrize(
    "raw",
    ["", "   ", '"unterminated', "'", '[{"a": "unterminated', '{"a": "b', "]]]}}}", "```json\n```", "\\"],
)
def test_every_input_yields_a_typed_result(raw):
    result = extract_json(raw, FinishReason.length)
    assert isinstance(result, (Complete, Recovered, Failed))
    json.dumps(result.to_dict())


def test_result_serialization():
    recovered = extract_json('[{"a":1},{"b":', FinishReason.length)
    assert recovered.to_dict() == {"status": "recovered", "value": [{"a": 1}], "warnings": ["TruncationFixed"]}
    failed = extract_json("")
    assert failed.to_dict()["error"]["kind"] == "NoStructureFound"
