"""
Exception hierarchy for the screen annotator session engine.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class AnnotatorException(Exception):
    """Base exception for all screen annotator errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class MalformedTimestampError(AnnotatorException):
    """Raised when a value is not a `YYYY-MM-DD HH-MM-SS` session identifier."""

    def __init__(self, value: str, reason: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize malformed timestamp error.

        Args:
            value: Offending identifier
            reason: Which part of the shape check failed
            details: Additional context
        """
        details = details or {}
        details["value"] = value
        self.value = value
        super().__init__(f"Malformed session timestamp ({reason}): {value!r}", details)


class ObjectStoreError(AnnotatorException):
    """Raised when an object store operation fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize object store error.

        Args:
            message: Error message
            operation: Operation that failed (list, get, put, delete, presign)
            key: Object key or prefix involved
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if key is not None:
            details["key"] = key
        self.operation = operation
        self.key = key
        super().__init__(message, details)


class ObjectNotFoundError(ObjectStoreError):
    """Raised when the requested object does not exist."""

    def __init__(self, key: str, operation: str = "get", details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Object not found: {key}", operation, key, details)


class TransientStoreError(ObjectStoreError):
    """Raised when throttling or timeouts persist after client-side retries."""

    pass


class PresignError(ObjectStoreError):
    """Raised when a presigned URL cannot be generated."""

    def __init__(self, key: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Failed to presign {key}: {reason}", "presign", key, details)


class CorruptDocumentError(AnnotatorException):
    """Raised when a stored JSON document does not match its schema."""

    def __init__(self, key: str, reason: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize corrupt document error.

        Args:
            key: Object key of the document
            reason: Validation failure summary
            details: Additional context
        """
        details = details or {}
        details["key"] = key
        self.key = key
        super().__init__(f"Corrupt document at {key}: {reason}", details)


class AnnotationNotFoundError(AnnotatorException):
    """Raised when no annotation matches the timestamp targeted for deletion."""

    def __init__(self, session_id: str, timestamp: int, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_id"] = session_id
        details["timestamp"] = timestamp
        self.session_id = session_id
        self.timestamp = timestamp
        super().__init__(f"No annotation at {timestamp} in session {session_id}", details)


class LocalScanUnavailableError(AnnotatorException):
    """Raised when a local video directory cannot be read (non-critical)."""

    def __init__(self, directory: str, reason: str) -> None:
        self.directory = directory
        super().__init__(f"Cannot scan {directory}: {reason}", {"directory": directory})


class SessionIndexUnavailableError(AnnotatorException):
    """Raised when the artifact prefixes of a user cannot be listed at all."""

    def __init__(self, username: str, cause: Exception) -> None:
        super().__init__(
            f"Session index unavailable for {username}: {cause}",
            {"username": username, "error_type": type(cause).__name__},
        )
