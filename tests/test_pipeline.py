from unittest.mock import MagicMock

import anyio
import pytest

from geo_categorizer.classifiers.base import ChatModel, ModelTurn
from geo_categorizer.manager import SuggestionService
from geo_categorizer.models import HistoricalTransaction, Suggestion, TransactionContext
from geo_categorizer.services.suggestion import SuggestionPipeline


@pytest.mark.anyio
async def test_pipeline_predict_runs_service() -> None:
    service = MagicMock()
    service.suggest.return_value = Suggestion(category="Health", confidence=60, reasoning="pharmacy")
    pipeline = SuggestionPipeline(service=service)
    context = TransactionContext(latitude=0, longitude=0, amount=5, datetime="2024-01-15")

    result = await pipeline.predict(context)

    assert result.category == "Health"
    service.suggest.assert_called_once_with(context)


@pytest.mark.anyio
async def test_pipeline_predict_from_history() -> None:
    service = MagicMock()
    service.suggest_from_history.return_value = (
        Suggestion(category="Other", confidence=0, reasoning="nothing nearby"),
        0,
    )
    pipeline = SuggestionPipeline(service=service)

    suggestion, count = await pipeline.predict_from_history(
        latitude=1.0,
        longitude=2.0,
        amount=3.0,
        datetime="2024-01-15",
        history=[],
    )

    assert count == 0
    assert suggestion.reasoning == "nothing nearby"
    service.suggest_from_history.assert_called_once_with(1.0, 2.0, 3.0, "2024-01-15", [])


@pytest.mark.anyio
async def test_concurrent_requests_are_independent() -> None:
    def answer(messages: list[dict], **_: object) -> ModelTurn:
        prompt = messages[1]["content"]
        category = "Housing" if "€900" in prompt else "Groceries"
        return ModelTurn(text=f'{{"category": "{category}", "confidence": 70, "reasoning": "r"}}')

    model = MagicMock(spec=ChatModel)
    model.complete.side_effect = answer
    pipeline = SuggestionPipeline(service=SuggestionService(model=model, max_steps=3, temperature=0.0))

    history: list[HistoricalTransaction] = []
    results: dict[int, Suggestion] = {}

    async def run(amount: int) -> None:
        suggestion, _ = await pipeline.predict_from_history(
            latitude=48.2,
            longitude=16.37,
            amount=amount,
            datetime="2024-01-15T12:00:00Z",
            history=history,
        )
        results[amount] = suggestion

    async with anyio.create_task_group() as tg:
        for amount in (12, 900, 30, 900):
            tg.start_soon(run, amount)

    assert results[900].category == "Housing"
    assert results[12].category == "Groceries"
    assert results[30].category == "Groceries"
