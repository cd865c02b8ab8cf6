"""
Annotation log store.

Each session has one annotation log: a JSON array document at
`{username}/annotations/{session_id}.json`. Appends and deletes are
whole-document read-modify-write cycles with no conditional write.

Concurrency: two appends racing on the same log both read the same prior
state and the later put silently replaces the earlier one, losing its
entry. The document stays well-formed. Overwrites are logged with the
prior and written lengths so lost updates can be spotted.

Dependencies: annotator.boundary.aws, annotator.models.annotation
System role: Annotation persistence
"""

import json
import logging

from pydantic import ValidationError

from annotator.boundary.aws.object_store import ObjectStore
from annotator.core import artifact_keys, timestamp_codec
from annotator.core.exceptions import (
    AnnotationNotFoundError,
    CorruptDocumentError,
    ObjectNotFoundError,
)
from annotator.models.annotation import AnnotationEntry, AnnotationLog

logger = logging.getLogger(__name__)


class AnnotationLogStore:
    """Append/delete operations on per-session annotation logs."""

    def __init__(self, store: ObjectStore) -> None:
        """
        Initialize annotation log store.

        Args:
            store: Object store holding session artifacts
        """
        self.store = store

    async def _read(self, key: str) -> list[AnnotationEntry]:
        body = await self.store.get_object(key)
        try:
            return AnnotationLog.validate_json(body)
        except ValidationError as e:
            raise CorruptDocumentError(key, f"{e.error_count()} validation error(s)") from e

    async def _write(self, key: str, entries: list[AnnotationEntry]) -> None:
        payload = [entry.model_dump(mode="json") for entry in entries]
        body = json.dumps(payload, indent=2).encode("utf-8")
        await self.store.put_object(key, body, "application/json")

    async def get(self, session_id: str, username: str) -> list[AnnotationEntry]:
        """
        Read a session's annotations in insertion order.

        Args:
            session_id: Session identifier
            username: Owner namespace

        Returns:
            list[AnnotationEntry]: Stored entries, empty if no log exists

        Raises:
            MalformedTimestampError: session_id is not a session timestamp
            CorruptDocumentError: Stored log is invalid
            ObjectStoreError: Read failed
        """
        session_id = timestamp_codec.ensure_canonical(session_id)
        key = artifact_keys.annotations_key(username, session_id)
        try:
            return await self._read(key)
        except ObjectNotFoundError:
            return []

    async def append(
        self,
        session_id: str,
        username: str,
        entry: AnnotationEntry,
    ) -> list[AnnotationEntry]:
        """
        Append one annotation to the end of a session's log.

        A missing log starts empty; any other read failure propagates.

        Args:
            session_id: Session identifier
            username: Owner namespace
            entry: Annotation to append

        Returns:
            list[AnnotationEntry]: Full sequence as written

        Raises:
            MalformedTimestampError: session_id is not a session timestamp
            CorruptDocumentError: Existing log is invalid
            ObjectStoreError: Read (other than missing) or write failed
        """
        session_id = timestamp_codec.ensure_canonical(session_id)
        key = artifact_keys.annotations_key(username, session_id)
        try:
            entries = await self._read(key)
        except ObjectNotFoundError:
            logger.info(f"{__name__}:append - No log at {key}, starting fresh")
            entries = []

        prior_length = len(entries)
        entries.append(entry)
        await self._write(key, entries)

        logger.info(
            f"{__name__}:append - Overwrote {key} prior={prior_length} written={len(entries)}"
        )
        return entries

    async def delete(
        self,
        session_id: str,
        username: str,
        target_timestamp: int,
    ) -> list[AnnotationEntry]:
        """
        Remove the first annotation whose timestamp equals `target_timestamp`.

        Args:
            session_id: Session identifier
            username: Owner namespace
            target_timestamp: Exact timestamp (epoch ms) of the entry to drop

        Returns:
            list[AnnotationEntry]: Remaining sequence as written

        Raises:
            MalformedTimestampError: session_id is not a session timestamp
            ObjectNotFoundError: Session has no annotation log
            AnnotationNotFoundError: No entry has that timestamp (log untouched)
            CorruptDocumentError: Existing log is invalid
            ObjectStoreError: Read or write failed
        """
        session_id = timestamp_codec.ensure_canonical(session_id)
        key = artifact_keys.annotations_key(username, session_id)
        entries = await self._read(key)

        remaining = list(entries)
        for index, entry in enumerate(remaining):
            if entry.timestamp == target_timestamp:
                del remaining[index]
                break

        if len(remaining) == len(entries):
            raise AnnotationNotFoundError(session_id, target_timestamp)

        await self._write(key, remaining)
        logger.info(
            f"{__name__}:delete - Removed annotation at {target_timestamp} from {key} "
            f"remaining={len(remaining)}"
        )
        return remaining
