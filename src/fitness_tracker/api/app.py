"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitness_tracker.api.routes import router
from fitness_tracker.app_logging import configure_logging
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.errors import (
    ConflictRetryable,
    IndexOutOfRange,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container
    app.include_router(router)

    @app.exception_handler(ValidationError)
    async def validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "validation_error",
                "field": exc.field,
                "reason": exc.reason,
            },
        )

    @app.exception_handler(IndexOutOfRange)
    async def index_out_of_range(
        _request: Request, exc: IndexOutOfRange
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "index_out_of_range",
                "index": exc.index,
                "size": exc.size,
            },
        )

    @app.exception_handler(ConflictRetryable)
    async def conflict(_request: Request, exc: ConflictRetryable) -> JSONResponse:
        logger.warning("Returning conflict for %s %s", exc.entity, exc.entity_id)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "conflict", "entity": exc.entity},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
