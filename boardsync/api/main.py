"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boardsync.api.config import configure_logging, get_settings
from boardsync.api.dependencies import get_cache, get_registry
from boardsync.api.middleware import LoggingMiddleware
from boardsync.api.routes import api_router
from boardsync.api.routes.health import router as health_router
from boardsync.errors import (
    BoardSyncError,
    ConcurrentModificationError,
    IOFailure,
    LayoutNotFoundError,
    ValidationError,
)

settings = get_settings()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    LayoutNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConcurrentModificationError: status.HTTP_409_CONFLICT,
    IOFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Debug mode: {settings.debug}")

    registry = get_registry()
    logger.info(f"{len(registry)} layout(s) available")
    cache = get_cache()
    cache.start()

    yield

    cache.dispose()
    logger.info("Shutting down...")


async def boardsync_error_handler(request: Request, exc: BoardSyncError) -> JSONResponse:
    """Translate domain errors into JSON error responses."""
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code, "context": exc.context},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Layout-driven section management for markdown boards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Logging middleware
    app.add_middleware(
        LoggingMiddleware,
        exclude_paths=["/health"],
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BoardSyncError, boardsync_error_handler)

    app.include_router(health_router, tags=["Health"])
    app.include_router(api_router, prefix="/api")

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "boardsync.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
