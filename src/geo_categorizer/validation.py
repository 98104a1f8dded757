import json
import math
from typing import Any

from geo_categorizer.logger import get_logger
from geo_categorizer.models import CATEGORIES, FALLBACK_CATEGORY, Suggestion, is_category

logger = get_logger(__name__)

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 95

NO_ANSWER_REASON = "Model returned no answer"
PARSE_FAILURE_REASON = "Failed to parse AI response"


class SuggestionFormatError(ValueError):
    pass


def fallback_suggestion(reasoning: str) -> Suggestion:
    return Suggestion(category=FALLBACK_CATEGORY, confidence=0, reasoning=reasoning)


def clamp_confidence(value: int | float) -> int | float:
    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, value))


def strip_to_json_object(text: str) -> str:
    """Drop anything before the first '{' and after the last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return ""
    return text[start:end + 1]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _load_payload(text: str) -> dict[str, Any]:
    cleaned = strip_to_json_object(text.strip())
    if not cleaned:
        raise SuggestionFormatError("no JSON object found")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise SuggestionFormatError(f"invalid JSON ({e.msg})") from e
    except (ValueError, RecursionError) as e:
        # oversized integer literals and deeply nested arrays
        raise SuggestionFormatError(f"invalid JSON ({type(e).__name__})") from e
    if not isinstance(payload, dict):
        raise SuggestionFormatError("response is not a JSON object")

    category = payload.get("category")
    if not isinstance(category, str) or not category:
        raise SuggestionFormatError("missing or non-string 'category'")
    if not _is_number(payload.get("confidence")):
        raise SuggestionFormatError("missing or non-numeric 'confidence'")
    reasoning = payload.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning:
        raise SuggestionFormatError("missing or empty 'reasoning'")
    return payload


def parse_suggestion(text: str | None) -> Suggestion:
    """
    Turn raw model output into a Suggestion. Never raises: anything that does
    not satisfy the output contract becomes an "Other" suggestion with zero
    confidence and a reason naming the failed check.
    """
    if not text or not text.strip():
        logger.warning("[SUGGEST] Empty model response.")
        return fallback_suggestion(NO_ANSWER_REASON)

    try:
        payload = _load_payload(text)
    except SuggestionFormatError as e:
        logger.error("[SUGGEST] Error parsing AI response: %s. Raw response: %r", e, text)
        return fallback_suggestion(f"{PARSE_FAILURE_REASON}: {e}")

    category = payload["category"]
    if not is_category(category):
        logger.error("[SUGGEST] Invalid category suggested: %r", category)
        return fallback_suggestion(
            f"Invalid category suggested: {category}. Must be one of: {', '.join(CATEGORIES)}"
        )

    return Suggestion(
        category=category,
        confidence=clamp_confidence(payload["confidence"]),
        reasoning=payload["reasoning"],
    )
