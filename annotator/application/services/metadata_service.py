"""
Session metadata store.

Whole-document get/put of `{username}/metadata/{session_id}.json`.
Saves are unconditional overwrites (last writer wins).

Dependencies: annotator.boundary.aws, annotator.models.session
System role: Session metadata persistence
"""

import logging

from pydantic import ValidationError

from annotator.boundary.aws.object_store import ObjectStore
from annotator.core import artifact_keys
from annotator.core.exceptions import CorruptDocumentError
from annotator.models.session import SessionMetadata

logger = logging.getLogger(__name__)


def parse_metadata(body: bytes, key: str) -> SessionMetadata:
    """
    Validate a stored metadata document.

    Args:
        body: Raw JSON document
        key: Object key, for error context

    Returns:
        SessionMetadata: Parsed (and migrated) document

    Raises:
        CorruptDocumentError: Document is not valid SessionMetadata
    """
    try:
        return SessionMetadata.model_validate_json(body)
    except ValidationError as e:
        raise CorruptDocumentError(key, f"{e.error_count()} validation error(s)") from e


class SessionMetadataStore:
    """Reads and writes per-session metadata documents."""

    def __init__(self, store: ObjectStore) -> None:
        """
        Initialize metadata store.

        Args:
            store: Object store holding session artifacts
        """
        self.store = store

    async def save(self, metadata: SessionMetadata) -> str:
        """
        Overwrite the metadata document for a session.

        Args:
            metadata: Document to persist

        Returns:
            str: Object key written

        Raises:
            ObjectStoreError: If the write fails
        """
        key = artifact_keys.metadata_key(metadata.username, metadata.session_id)
        await self.store.put_object(key, metadata.to_document(), "application/json")
        logger.info(f"{__name__}:save - Metadata saved key={key}")
        return key

    async def load(self, username: str, session_id: str) -> SessionMetadata:
        """
        Load the metadata document for a session.

        Args:
            username: Owner namespace
            session_id: Session identifier

        Returns:
            SessionMetadata: Stored document

        Raises:
            ObjectNotFoundError: Session metadata not created yet
            CorruptDocumentError: Stored document is invalid
            ObjectStoreError: Read failed
        """
        key = artifact_keys.metadata_key(username, session_id)
        body = await self.store.get_object(key)
        return parse_metadata(body, key)
