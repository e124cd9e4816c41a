"""
Padma Backend Main Application
Flow: main.py -> config -> component registration -> middleware -> routers
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from padma_backend.api import health
from padma_backend.config.settings import get_settings
from padma_backend.core.logging import get_logger
from padma_backend.middleware.logging import LoggingMiddleware
from padma_backend.services.registration_service import registration_service

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Padma Backend", version=settings.APP_VERSION)

    if settings.REGISTER_COMPONENTS_ON_STARTUP:
        # An aborted run raises and fails startup with a non-zero exit
        await registration_service.register_components()
    else:
        logger.info("Component registration on startup disabled")

    yield

    logger.info("Shutting down Padma Backend")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(LoggingMiddleware)
    app.include_router(health.router, prefix="/api/health", tags=["health"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "padma_backend.main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.DEBUG,
        log_config=None,  # Use structlog instead
    )
