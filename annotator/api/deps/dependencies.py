"""
Dependency injection container.

Factory functions for FastAPI dependencies. The object store and the local
video locator are built once per process and shared by every service.

Dependencies: annotator.configs, annotator.application, annotator.boundary
System role: DI container for service injection
"""

from datetime import timedelta
from functools import lru_cache

from annotator.configs import Settings, get_settings
from annotator.application.services import (
    AnnotationLogStore,
    SessionIndexBuilder,
    SessionLifecycleManager,
    SessionMetadataStore,
)


class ServiceCache:
    """Container for cached infrastructure instances."""

    def __init__(self):
        self._object_store = None
        self._locator = None

    @property
    def object_store(self):
        """Get cached S3 object store."""
        if self._object_store is None:
            from annotator.boundary.aws.s3_client import S3ObjectStore

            self._object_store = S3ObjectStore.from_settings(get_settings().s3_storage)
        return self._object_store

    @property
    def locator(self):
        """Get cached local video locator."""
        if self._locator is None:
            from annotator.core.local_video_locator import LocalVideoLocator

            local_videos = get_settings().local_videos
            self._locator = LocalVideoLocator(
                search_directories=local_videos.search_directories,
                tolerance_window=timedelta(seconds=local_videos.tolerance_window_seconds),
            )
        return self._locator

    def clear(self) -> None:
        """Clear all cached instances."""
        self._object_store = None
        self._locator = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_index_builder() -> SessionIndexBuilder:
    """
    Get session index builder.

    Returns:
        SessionIndexBuilder: Builder over the shared store and locator
    """
    cache = get_service_cache()
    settings = get_settings()
    return SessionIndexBuilder(
        store=cache.object_store,
        locator=cache.locator,
        tolerance_window=timedelta(seconds=settings.local_videos.tolerance_window_seconds),
        override_threshold=timedelta(seconds=settings.local_videos.override_threshold_seconds),
        presigned_url_expiry=settings.s3_storage.presigned_url_expiry,
    )


def get_annotation_store() -> AnnotationLogStore:
    """Get annotation log store."""
    return AnnotationLogStore(get_service_cache().object_store)


def get_metadata_store() -> SessionMetadataStore:
    """Get session metadata store."""
    return SessionMetadataStore(get_service_cache().object_store)


def get_lifecycle_manager() -> SessionLifecycleManager:
    """Get session lifecycle manager."""
    return SessionLifecycleManager(
        get_service_cache().object_store,
        video_extension=get_settings().local_videos.upload_extension,
    )
