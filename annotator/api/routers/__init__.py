"""API routers."""

from .annotations import router as annotations_router
from .health import router as health_router
from .sessions import router as sessions_router

__all__ = [
    "annotations_router",
    "health_router",
    "sessions_router",
]
