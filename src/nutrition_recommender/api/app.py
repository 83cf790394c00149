"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from nutrition_recommender.api.schemas import ProfileRequest
from nutrition_recommender.app_logging import configure_logging
from nutrition_recommender.containers import AppContainer
from nutrition_recommender.services.export import (
    format_summary_text,
    requirements_to_dict,
    safety_to_dict,
    summary_to_dict,
)
from nutrition_recommender.services.profiles import ProfileValidationError
from nutrition_recommender.services.recommendations import CatalogUnavailableError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ProfileValidationError)
    async def profile_error_handler(
        request: Request, exc: ProfileValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Invalid profile", "errors": exc.errors},
        )

    @app.exception_handler(CatalogUnavailableError)
    async def catalog_error_handler(
        request: Request, exc: CatalogUnavailableError
    ) -> JSONResponse:
        logger.warning("Catalog unavailable for %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recommendations")
    async def recommendations(
        payload: ProfileRequest, request: Request
    ) -> dict[str, object]:
        """Return the full recommendation summary for a profile."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.recommendation_service.recommend(payload.to_raw())
        return summary_to_dict(summary)

    @app.post("/recommendations/text", response_class=PlainTextResponse)
    async def recommendations_text(
        payload: ProfileRequest, request: Request
    ) -> PlainTextResponse:
        """Return the recommendation summary as shareable plain text."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.recommendation_service.recommend(payload.to_raw())
        return PlainTextResponse(format_summary_text(summary))

    @app.post("/requirements")
    async def requirements(
        payload: ProfileRequest, request: Request
    ) -> dict[str, object]:
        """Return daily nutrient requirements for a profile."""
        state_container: AppContainer = request.app.state.container
        result = state_container.recommendation_service.requirements(payload.to_raw())
        return requirements_to_dict(result)

    @app.post("/safety")
    async def safety(payload: ProfileRequest, request: Request) -> dict[str, object]:
        """Return the screening result of every catalog product."""
        state_container: AppContainer = request.app.state.container
        results = state_container.recommendation_service.screen(payload.to_raw())
        return {"results": [safety_to_dict(result) for result in results]}

    return app
