"""FastAPI dependency factories."""

from .dependencies import (
    get_annotation_store,
    get_index_builder,
    get_lifecycle_manager,
    get_metadata_store,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "get_annotation_store",
    "get_index_builder",
    "get_lifecycle_manager",
    "get_metadata_store",
    "get_service_cache",
    "get_settings_dependency",
]
