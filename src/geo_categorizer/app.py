from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from geo_categorizer.api.routes import suggest
from geo_categorizer.core import settings
from geo_categorizer.logger import get_logger, setup_logging
from geo_categorizer.manager import SuggestionService
from geo_categorizer.services.suggestion import SuggestionPipeline

logger = get_logger(__name__)


async def _invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("[SUGGEST] Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={
            "error": "Missing required fields",
            "details": jsonable_encoder(
                [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
            ),
        },
    )


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        service = SuggestionService()
        app.state.service = service
        app.state.pipeline = SuggestionPipeline(service=service)

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Geo Categorizer", lifespan=lifespan)
    app.add_exception_handler(RequestValidationError, _invalid_request_handler)
    app.include_router(suggest.router)

    return app


app = create_app()
