from pydantic import BaseModel, Field

from geo_categorizer.models import (
    HistoricalTransaction,
    NearbyTransaction,
    Suggestion,
    TransactionContext,
)


class NearbyExpense(BaseModel):
    category: str = Field(strict=True)
    amount: float = Field(strict=True, allow_inf_nan=False)
    distance: float = Field(strict=True, allow_inf_nan=False)
    datetime: str = Field(strict=True)

    def to_domain(self) -> NearbyTransaction:
        return NearbyTransaction(
            category=self.category,
            amount=self.amount,
            distance=self.distance,
            datetime=self.datetime,
        )


class HistoryExpense(BaseModel):
    category: str = Field(strict=True)
    amount: float = Field(strict=True, allow_inf_nan=False)
    latitude: float = Field(strict=True, allow_inf_nan=False)
    longitude: float = Field(strict=True, allow_inf_nan=False)
    datetime: str = Field(strict=True)

    def to_domain(self) -> HistoricalTransaction:
        return HistoricalTransaction(**self.model_dump())


class SuggestRequest(BaseModel):
    latitude: float = Field(strict=True, allow_inf_nan=False)
    longitude: float = Field(strict=True, allow_inf_nan=False)
    amount: float = Field(strict=True, ge=0, allow_inf_nan=False)
    datetime: str = Field(strict=True)
    nearbyExpenses: list[NearbyExpense]

    def to_context(self) -> TransactionContext:
        return TransactionContext(
            latitude=self.latitude,
            longitude=self.longitude,
            amount=self.amount,
            datetime=self.datetime,
            nearby=tuple(expense.to_domain() for expense in self.nearbyExpenses),
        )


class HistorySuggestRequest(BaseModel):
    latitude: float = Field(strict=True, allow_inf_nan=False)
    longitude: float = Field(strict=True, allow_inf_nan=False)
    amount: float = Field(strict=True, ge=0, allow_inf_nan=False)
    datetime: str = Field(strict=True)
    history: list[HistoryExpense]


class HistorySuggestionResponse(Suggestion):
    nearbyCount: int
