"""Service orchestrators."""

from .annotation_service import AnnotationLogStore
from .metadata_service import SessionMetadataStore
from .session_index_service import SessionIndexBuilder
from .session_lifecycle_service import SessionLifecycleManager

__all__ = [
    "AnnotationLogStore",
    "SessionIndexBuilder",
    "SessionLifecycleManager",
    "SessionMetadataStore",
]
