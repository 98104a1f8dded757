from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Ordered, closed vocabulary shared by the prompt, the validator and the API.
CATEGORIES: tuple[str, ...] = (
    "Groceries",
    "Restaurants",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Health",
    "Education",
    "Housing",
    "Utilities",
    "Other",
)

Category = Literal[CATEGORIES]

FALLBACK_CATEGORY = "Other"


def is_category(value: Any) -> bool:
    return isinstance(value, str) and value in CATEGORIES


class HistoricalTransaction(BaseModel):
    category: str
    amount: float
    latitude: float
    longitude: float
    datetime: str


class NearbyTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    amount: float
    distance: float  # meters from the query point
    datetime: str


class TransactionContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    amount: float = Field(ge=0)
    datetime: str
    nearby: tuple[NearbyTransaction, ...] = ()


class Suggestion(BaseModel):
    category: Category
    confidence: int | float  # 0 to 95
    reasoning: str


class ToolInvocation(BaseModel):
    name: str
    arguments: dict[str, Any]
    result: dict[str, Any] | None = None
    error: str | None = None
