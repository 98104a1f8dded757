import asyncio

from geo_categorizer.manager import SuggestionService
from geo_categorizer.models import HistoricalTransaction, Suggestion, TransactionContext


class SuggestionPipeline:
    """Runs the blocking suggestion service off the event loop."""

    def __init__(self, service: SuggestionService) -> None:
        self.service = service

    async def predict(self, context: TransactionContext) -> Suggestion:
        return await asyncio.to_thread(self.service.suggest, context)

    async def predict_from_history(
        self,
        *,
        latitude: float,
        longitude: float,
        amount: float,
        datetime: str,
        history: list[HistoricalTransaction],
    ) -> tuple[Suggestion, int]:
        return await asyncio.to_thread(
            self.service.suggest_from_history,
            latitude,
            longitude,
            amount,
            datetime,
            history,
        )
