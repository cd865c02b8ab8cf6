"""
Annotation API endpoints.

Routes:
- GET /users/{username}/sessions/{session_id}/annotations - Read the log
- POST /users/{username}/sessions/{session_id}/annotations - Append a note
- DELETE /users/{username}/sessions/{session_id}/annotations/{timestamp} - Remove a note

Appends are last-writer-wins: concurrent appends on one session can drop
an entry.

Dependencies: annotator.application.services.annotation_service
System role: Annotation HTTP API
"""

from fastapi import APIRouter, Depends

from annotator.api.deps import get_annotation_store
from annotator.api.routers.error_handling import handle_session_errors
from annotator.application.services import AnnotationLogStore
from annotator.models.annotation import AnnotationEntry, CreateAnnotationRequest

router = APIRouter(prefix="/users/{username}/sessions/{session_id}/annotations", tags=["annotations"])


@router.get("", response_model=list[AnnotationEntry])
@handle_session_errors
async def get_annotations(
    username: str,
    session_id: str,
    annotation_store: AnnotationLogStore = Depends(get_annotation_store),
) -> list[AnnotationEntry]:
    """Read a session's annotations in insertion order."""
    return await annotation_store.get(session_id, username)


@router.post("", response_model=list[AnnotationEntry], status_code=201)
@handle_session_errors
async def append_annotation(
    username: str,
    session_id: str,
    request: CreateAnnotationRequest,
    annotation_store: AnnotationLogStore = Depends(get_annotation_store),
) -> list[AnnotationEntry]:
    """
    Append an annotation to a session's log.

    Returns:
        list[AnnotationEntry]: Full log as written
    """
    entry = AnnotationEntry(note=request.note, timestamp=request.timestamp)
    return await annotation_store.append(session_id, username, entry)


@router.delete("/{timestamp}", response_model=list[AnnotationEntry])
@handle_session_errors
async def delete_annotation(
    username: str,
    session_id: str,
    timestamp: int,
    annotation_store: AnnotationLogStore = Depends(get_annotation_store),
) -> list[AnnotationEntry]:
    """
    Delete the first annotation at `timestamp`.

    Raises:
        HTTPException(404): No log, or no annotation at that timestamp
    """
    return await annotation_store.delete(session_id, username, timestamp)
