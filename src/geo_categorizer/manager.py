import os
from collections.abc import Iterable

from geo_categorizer.classifiers.base import ChatModel
from geo_categorizer.classifiers.llm import OpenAIChatModel
from geo_categorizer.classifiers.prompt import build_prompt
from geo_categorizer.core import settings
from geo_categorizer.domain.geo import filter_nearby
from geo_categorizer.logger import get_logger
from geo_categorizer.models import HistoricalTransaction, Suggestion, TransactionContext
from geo_categorizer.orchestrator import ClassificationOrchestrator
from geo_categorizer.tools.base import ToolRegistry
from geo_categorizer.tools.expense import build_expense_tools
from geo_categorizer.validation import fallback_suggestion, parse_suggestion

logger = get_logger(__name__)

LLM_DISABLED_REASON = "LLM classifier disabled: OPENAI_API_KEY is not configured"


class SuggestionService:
    def __init__(
        self,
        model: ChatModel | None = None,
        tools: ToolRegistry | None = None,
        max_steps: int | None = None,
        temperature: float | None = None,
        radius_meters: float | None = None,
    ):
        self.tools = tools if tools is not None else build_expense_tools()
        self.max_steps = max_steps if max_steps is not None else settings.get_max_steps()
        self.temperature = temperature if temperature is not None else settings.get_temperature()
        self.radius_meters = (
            radius_meters if radius_meters is not None else settings.get_radius_meters()
        )

        if model is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if api_key:
                model_name = settings.get_openai_model()
                base_url = os.getenv("OPENAI_BASE_URL")
                model = OpenAIChatModel(
                    api_key=api_key,
                    model=model_name,
                    base_url=base_url,
                    timeout=settings.get_openai_timeout(),
                )
                logger.info(f"LLM enabled: model={model_name}, base_url={base_url or 'default'}")
            else:
                logger.warning("OPENAI_API_KEY not found. Suggestions will fall back to 'Other'.")

        self.model = model
        self.orchestrator = (
            ClassificationOrchestrator(
                model,
                self.tools,
                max_steps=self.max_steps,
                temperature=self.temperature,
            )
            if model is not None
            else None
        )

    @property
    def llm_enabled(self) -> bool:
        return self.orchestrator is not None

    def suggest(self, context: TransactionContext) -> Suggestion:
        """
        Suggest a category for the transaction. Model and output failures
        resolve to the fallback suggestion; this never raises for them.
        """
        if self.orchestrator is None:
            return fallback_suggestion(LLM_DISABLED_REASON)

        prompt = build_prompt(context)
        logger.debug(
            "[SUGGEST] amount=%s datetime=%s nearby=%s",
            context.amount,
            context.datetime,
            len(context.nearby),
        )

        try:
            result = self.orchestrator.run(prompt)
        except Exception as e:
            logger.error(f"[LLM] Error getting category suggestion: {e}")
            return fallback_suggestion(f"Failed to get category suggestion: {e}")

        logger.debug("[LLM] Raw response after %s step(s): %r", result.steps, result.text)
        suggestion = parse_suggestion(result.text)
        logger.info(
            "[SUGGEST] -> '%s' (confidence: %s, steps: %s, tools: %s)",
            suggestion.category,
            suggestion.confidence,
            result.steps,
            len(result.invocations),
        )
        return suggestion

    def suggest_from_history(
        self,
        latitude: float,
        longitude: float,
        amount: float,
        datetime: str,
        history: Iterable[HistoricalTransaction],
    ) -> tuple[Suggestion, int]:
        nearby = filter_nearby(latitude, longitude, history, radius_meters=self.radius_meters)
        context = TransactionContext(
            latitude=latitude,
            longitude=longitude,
            amount=amount,
            datetime=datetime,
            nearby=tuple(nearby),
        )
        return self.suggest(context), len(nearby)
