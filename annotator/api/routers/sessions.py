"""
Session API endpoints.

Routes:
- PUT /users/{username} - Provision the user's namespace
- GET /users/{username}/sessions - Session index, newest first
- DELETE /users/{username}/sessions/{session_id} - Delete all artifacts
- GET /users/{username}/sessions/{session_id}/metadata - Load metadata
- PUT /users/{username}/sessions/{session_id}/metadata - Save metadata

Dependencies: annotator.application.services, annotator.models
System role: Session management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from annotator.api.deps import (
    get_index_builder,
    get_lifecycle_manager,
    get_metadata_store,
    get_settings_dependency,
)
from annotator.api.routers.error_handling import handle_session_errors
from annotator.application.services import (
    SessionIndexBuilder,
    SessionLifecycleManager,
    SessionMetadataStore,
)
from annotator.configs import Settings
from annotator.models.session import DeletionReport, SessionMetadata, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["sessions"])


@router.put("/{username}", response_model=list[str])
@handle_session_errors
async def provision_user(
    username: str,
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> list[str]:
    """
    Create the metadata/annotations/videos folders of a user.

    Returns:
        list[str]: Folder marker keys written
    """
    return await lifecycle.provision_user(username)


@router.get("/{username}/sessions", response_model=SessionResponse, response_model_by_alias=True)
@handle_session_errors
async def list_sessions(
    username: str,
    builder: SessionIndexBuilder = Depends(get_index_builder),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionResponse:
    """
    List a user's sessions, newest first.

    Args:
        username: Owner namespace
        builder: Injected SessionIndexBuilder
        settings: Injected settings (index build timeout)

    Returns:
        SessionResponse: Assembled sessions and count

    Raises:
        HTTPException(502): Object store unreachable
    """
    sessions = await builder.build(username, timeout=settings.local_videos.index_build_timeout)
    return SessionResponse(sessions=sessions, total=len(sessions))


@router.delete("/{username}/sessions/{session_id}", response_model=DeletionReport)
@handle_session_errors
async def delete_session(
    username: str,
    session_id: str,
    lifecycle: SessionLifecycleManager = Depends(get_lifecycle_manager),
) -> DeletionReport:
    """
    Delete every artifact of a session.

    Raises:
        HTTPException(400): Malformed session id
        HTTPException(502): At least one artifact could not be deleted
    """
    report = await lifecycle.delete_session(username, session_id)
    if not report.success:
        raise HTTPException(status_code=502, detail=report.model_dump(mode="json", by_alias=True))
    return report


@router.get("/{username}/sessions/{session_id}/metadata", response_model=SessionMetadata)
@handle_session_errors
async def get_metadata(
    username: str,
    session_id: str,
    metadata_store: SessionMetadataStore = Depends(get_metadata_store),
) -> SessionMetadata:
    """
    Load a session's metadata document.

    Raises:
        HTTPException(404): Metadata not created yet
        HTTPException(422): Stored document is corrupt
    """
    return await metadata_store.load(username, session_id)


@router.put("/{username}/sessions/{session_id}/metadata", response_model=SessionMetadata)
@handle_session_errors
async def save_metadata(
    username: str,
    session_id: str,
    metadata: SessionMetadata,
    metadata_store: SessionMetadataStore = Depends(get_metadata_store),
) -> SessionMetadata:
    """
    Overwrite a session's metadata document.

    Raises:
        HTTPException(400): Path and body disagree on username or session id
    """
    if metadata.username != username or metadata.session_id != session_id:
        raise HTTPException(status_code=400, detail="Path does not match metadata document")
    await metadata_store.save(metadata)
    return metadata
