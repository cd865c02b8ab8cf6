"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, annotator.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from annotator.api.deps.dependencies import get_service_cache
from annotator.configs import get_settings
from annotator.observability import configure_logging, get_logger
from .routers import (
    annotations_router,
    health_router,
    sessions_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    logger = get_logger("uvicorn")

    # Startup
    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    _ = cache.object_store
    _ = cache.locator
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    cache.clear()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    configure_logging(get_settings().effective_log_level)

    app = FastAPI(
        title="Screen Annotator Session API",
        description="Recorded sessions, metadata and annotation logs backed by S3",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")
    app.include_router(annotations_router, prefix="/api/v1")

    return app


if __name__ == "__main__":
    uvicorn.run(
        "annotator.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
