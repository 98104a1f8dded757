import json

import pytest
from pydantic import ValidationError

from geo_categorizer.models import CATEGORIES, Suggestion
from geo_categorizer.validation import (
    clamp_confidence,
    parse_suggestion,
    strip_to_json_object,
)


def _payload(category: str = "Groceries", confidence: object = 80, reasoning: object = "x") -> str:
    return json.dumps({"category": category, "confidence": confidence, "reasoning": reasoning})


@pytest.mark.parametrize(
    "given, expected",
    [(-10, 0), (0, 0), (50, 50), (95, 95), (200, 95)],
)
def test_confidence_is_clamped(given: int, expected: int) -> None:
    assert clamp_confidence(given) == expected
    assert parse_suggestion(_payload(confidence=given)).confidence == expected


def test_valid_response_passes_through() -> None:
    suggestion = parse_suggestion(_payload(reasoning="matches nearby pattern"))
    assert suggestion.category == "Groceries"
    assert suggestion.confidence == 80
    assert suggestion.reasoning == "matches nearby pattern"


def test_surrounding_prose_is_stripped() -> None:
    text = 'Sure! Here you go:\n```json\n' + _payload(category="Restaurants") + '\n```\nHope that helps.'
    suggestion = parse_suggestion(text)
    assert suggestion.category == "Restaurants"
    assert suggestion.confidence == 80


def test_strip_to_json_object() -> None:
    assert strip_to_json_object('abc {"a": {"b": 1}} def') == '{"a": {"b": 1}}'
    assert strip_to_json_object("no braces") == ""
    assert strip_to_json_object("} backwards {") == ""


def test_fallbacks_are_distinguishable() -> None:
    empty = parse_suggestion("")
    garbage = parse_suggestion("not json")
    foreign = parse_suggestion('{"category":"Foo","confidence":50,"reasoning":"x"}')

    for suggestion in (empty, garbage, foreign):
        assert suggestion.category == "Other"
        assert suggestion.confidence == 0

    reasons = {empty.reasoning, garbage.reasoning, foreign.reasoning}
    assert len(reasons) == 3
    assert "Foo" in foreign.reasoning
    assert ", ".join(CATEGORIES) in foreign.reasoning


def test_none_text_falls_back() -> None:
    suggestion = parse_suggestion(None)
    assert suggestion.category == "Other"
    assert suggestion.confidence == 0
    assert suggestion.reasoning


@pytest.mark.parametrize(
    "text",
    [
        '{"confidence": 50, "reasoning": "x"}',
        '{"category": "Groceries", "reasoning": "x"}',
        '{"category": "Groceries", "confidence": 50}',
        '{"category": "Groceries", "confidence": "high", "reasoning": "x"}',
        '{"category": "Groceries", "confidence": true, "reasoning": "x"}',
        '{"category": "Groceries", "confidence": NaN, "reasoning": "x"}',
        '{"category": "Groceries", "confidence": 50, "reasoning": ""}',
        '{"category": "Groceries", "confidence": 50, "reasoning": ["x"]}',
        '{"category": ["Groceries"], "confidence": 50, "reasoning": "x"}',
        '{"category": "Groceries", "confidence": 50, "reasoning": "x"',
        "[1, 2, 3]",
        "{}",
    ],
)
def test_malformed_responses_fall_back(text: str) -> None:
    suggestion = parse_suggestion(text)
    assert suggestion.category == "Other"
    assert suggestion.confidence == 0
    assert suggestion.reasoning.startswith("Failed to parse AI response")


@pytest.mark.parametrize(
    "text",
    [
        "\x00\x01{{{}}}",
        '{"category": "groceries", "confidence": 90, "reasoning": "lowercase"}',
        '{"category": " Groceries", "confidence": 90, "reasoning": "padded"}',
        '{"category": "Microspends", "confidence": 90, "reasoning": "tool-only category"}',
        "}}}{{{",
        "🙂" * 50,
        '{"category": ' + "[" * 200000 + "]" * 200000 + "}",
        '{"category": "Groceries", "confidence": 1' + "0" * 5000 + ', "reasoning": "x"}',
    ],
)
def test_category_is_always_in_vocabulary(text: str) -> None:
    assert parse_suggestion(text).category in CATEGORIES


def test_float_confidence_is_kept() -> None:
    assert parse_suggestion(_payload(confidence=72.5)).confidence == 72.5


@pytest.mark.parametrize(
    "text",
    [
        '{"category": ' + "[" * 200000 + "]" * 200000 + "}",
        '{"category": "Groceries", "confidence": 1' + "0" * 5000 + ', "reasoning": "x"}',
    ],
)
def test_decoder_limits_fall_back(text: str) -> None:
    suggestion = parse_suggestion(text)
    assert suggestion.category == "Other"
    assert suggestion.confidence == 0
    assert suggestion.reasoning.startswith("Failed to parse AI response: invalid JSON")


def test_suggestion_rejects_unknown_category() -> None:
    with pytest.raises(ValidationError):
        Suggestion(category="Pets", confidence=10, reasoning="r")
