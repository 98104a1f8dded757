from typing import Annotated

from fastapi import APIRouter, Depends

from geo_categorizer.api.dependencies import get_pipeline, get_service
from geo_categorizer.api.schemas import (
    HistorySuggestionResponse,
    HistorySuggestRequest,
    SuggestRequest,
)
from geo_categorizer.logger import get_logger
from geo_categorizer.manager import SuggestionService
from geo_categorizer.models import CATEGORIES, Suggestion
from geo_categorizer.services.suggestion import SuggestionPipeline

logger = get_logger(__name__)

router = APIRouter()


@router.post("/api/suggest-category", response_model=Suggestion)
async def suggest_category(
    req: SuggestRequest,
    pipeline: Annotated[SuggestionPipeline, Depends(get_pipeline)],
) -> Suggestion:
    logger.info(
        "[SUGGEST] Request at (%s, %s) amount=%s with %s nearby expense(s)",
        req.latitude,
        req.longitude,
        req.amount,
        len(req.nearbyExpenses),
    )
    return await pipeline.predict(req.to_context())


@router.post("/api/suggest-category/history", response_model=HistorySuggestionResponse)
async def suggest_category_from_history(
    req: HistorySuggestRequest,
    pipeline: Annotated[SuggestionPipeline, Depends(get_pipeline)],
) -> HistorySuggestionResponse:
    suggestion, nearby_count = await pipeline.predict_from_history(
        latitude=req.latitude,
        longitude=req.longitude,
        amount=req.amount,
        datetime=req.datetime,
        history=[expense.to_domain() for expense in req.history],
    )
    return HistorySuggestionResponse(**suggestion.model_dump(), nearbyCount=nearby_count)


@router.get("/api/categories")
async def get_categories() -> list[str]:
    return list(CATEGORIES)


@router.get("/health")
async def health(
    service: Annotated[SuggestionService, Depends(get_service)],
) -> dict[str, str | bool]:
    return {"status": "ok", "llm_enabled": service.llm_enabled}
