import json

from geo_categorizer.models import CATEGORIES, TransactionContext

SYSTEM_INSTRUCTIONS = (
    "You are an AI assistant that helps categorize expenses based on location, "
    "amount, datetime, and spending patterns."
)


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def _serialize_nearby(context: TransactionContext) -> str:
    return json.dumps(
        [nearby.model_dump(mode="json") for nearby in context.nearby],
        ensure_ascii=False,
    )


def build_prompt(context: TransactionContext) -> str:
    categories = ", ".join(CATEGORIES)
    return f"""You will be given the current location, amount, datetime, and nearby expenses (with their datetimes).
Your task is to suggest the most likely category for a new expense at this location, along with a confidence score.

IMPORTANT:
1. You must respond with a valid JSON object only, no other text. The response must be in this exact format:
{{
  "category": "string",
  "confidence": number,
  "reasoning": "string"
}}

2. The category MUST be one of these exact values: {categories}. Do not suggest any other categories.

Consider these factors when making your suggestion:
1. The frequency of categories in nearby expenses
2. The typical spending patterns in the area
3. The context of the location (e.g., shopping district, restaurant area)
4. The amount of the expense and typical amounts for different categories (use the getTypicalAmountRange tool if needed)
5. Amount patterns in nearby expenses
6. The datetime and day of week for the current and nearby expenses (use the getDayOfWeek tool if needed)

Current location: {context.latitude}, {context.longitude}
Current amount: €{_format_amount(context.amount)}
Current datetime: {context.datetime}
Nearby expenses: {_serialize_nearby(context)}"""
