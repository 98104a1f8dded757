from fastapi import HTTPException, Request

from geo_categorizer.manager import SuggestionService
from geo_categorizer.services.suggestion import SuggestionPipeline


def get_service(request: Request) -> SuggestionService:
    service = getattr(request.app.state, "service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_pipeline(request: Request) -> SuggestionPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline
