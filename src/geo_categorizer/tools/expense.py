from datetime import datetime

from pydantic import BaseModel, Field

from geo_categorizer.tools.base import Tool, ToolRegistry

DEFAULT_AMOUNT_RANGE = {"min": 0, "max": 100}

TYPICAL_AMOUNT_RANGES: dict[str, dict[str, int]] = {
    "Groceries": {"min": 10, "max": 100},
    "Restaurants": {"min": 15, "max": 80},
    "Transportation": {"min": 2, "max": 50},
    "Entertainment": {"min": 5, "max": 100},
    "Shopping": {"min": 10, "max": 500},
    "Health": {"min": 5, "max": 200},
    "Education": {"min": 20, "max": 300},
    "Housing": {"min": 100, "max": 2000},
    "Utilities": {"min": 20, "max": 300},
    "Microspends": {"min": 0, "max": 1},
    "Other": {"min": 0, "max": 100},
}

INVALID_DATE = "Invalid Date"


class AmountRangeArgs(BaseModel):
    category: str = Field(description="The expense category")


class DayOfWeekArgs(BaseModel):
    date: str = Field(description="Date in ISO format")


def get_typical_amount_range(category: str) -> dict[str, int]:
    return dict(TYPICAL_AMOUNT_RANGES.get(category, DEFAULT_AMOUNT_RANGE))


def get_day_of_week(date: str) -> dict[str, str]:
    # Weekday of the date as written; no conversion to server local time.
    try:
        parsed = datetime.fromisoformat(date.strip().replace("Z", "+00:00"))
    except ValueError:
        return {"dayOfWeek": INVALID_DATE}
    return {"dayOfWeek": parsed.strftime("%A")}


TYPICAL_AMOUNT_RANGE_TOOL = Tool(
    name="getTypicalAmountRange",
    description="Get the typical min and max amount for a given expense category.",
    arguments=AmountRangeArgs,
    func=get_typical_amount_range,
)

DAY_OF_WEEK_TOOL = Tool(
    name="getDayOfWeek",
    description="Get the day of the week for a given date (ISO string).",
    arguments=DayOfWeekArgs,
    func=get_day_of_week,
)


def build_expense_tools() -> ToolRegistry:
    return ToolRegistry([TYPICAL_AMOUNT_RANGE_TOOL, DAY_OF_WEEK_TOOL])
