"""
Session error handling utilities.

Decorator mapping the domain exception hierarchy onto HTTP status codes
for every session endpoint.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from annotator.core.exceptions import (
    AnnotationNotFoundError,
    AnnotatorException,
    CorruptDocumentError,
    MalformedTimestampError,
    ObjectNotFoundError,
    ObjectStoreError,
    SessionIndexUnavailableError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_session_errors(func: F) -> F:
    """
    Decorator to transform session errors into HTTPExceptions.

    - ObjectNotFoundError, AnnotationNotFoundError -> 404
    - MalformedTimestampError -> 400
    - CorruptDocumentError -> 422
    - SessionIndexUnavailableError, ObjectStoreError -> 502
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except (ObjectNotFoundError, AnnotationNotFoundError) as e:
            logger.warning("Session resource not found", extra={"error_msg": str(e)})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except MalformedTimestampError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except CorruptDocumentError as e:
            logger.error("Corrupt session document", extra={"error_msg": str(e)})
            raise HTTPException(status_code=422, detail=e.message)

        except (SessionIndexUnavailableError, ObjectStoreError) as e:
            logger.error("Object store unavailable", extra={"error_msg": str(e)})
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

        except AnnotatorException as e:
            logger.exception("Unhandled session error")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
            )

    return wrapper  # type: ignore[return-value]
