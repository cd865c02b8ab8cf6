"""
Session lifecycle manager.

Deletes every artifact of one session, provisions a user's namespace and
uploads a finished recording. Independent keys are handled as a fan-out
of concurrent operations joined into one report.

Dependencies: annotator.boundary.aws, annotator.core, annotator.models.session
System role: Session deletion and upload orchestration
"""

import asyncio
import logging
from pathlib import Path

from annotator.application.services.metadata_service import SessionMetadataStore
from annotator.boundary.aws.object_store import ObjectStore
from annotator.core import artifact_keys, timestamp_codec
from annotator.core.artifact_keys import ArtifactCategory
from annotator.core.exceptions import (
    MalformedTimestampError,
    ObjectNotFoundError,
    ObjectStoreError,
)
from annotator.models.session import (
    ArtifactOutcome,
    DeletionReport,
    SessionMetadata,
    UploadReport,
)
from annotator.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

VIDEO_CONTENT_TYPES = {
    ".mkv": "video/x-matroska",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
}


class SessionLifecycleManager:
    """Session-wide operations across all three artifact categories."""

    def __init__(self, store: ObjectStore, video_extension: str = ".mkv") -> None:
        """
        Initialize lifecycle manager.

        Args:
            store: Object store holding session artifacts
            video_extension: Extension of stored video keys
        """
        self.store = store
        self.video_extension = video_extension
        self.metadata_store = SessionMetadataStore(store)

    def artifact_keys_for(self, username: str, session_id: str) -> list[str]:
        """
        Derive the three artifact keys of a session.

        Raises:
            MalformedTimestampError: session_id is not a session timestamp
        """
        session_id = timestamp_codec.ensure_canonical(session_id)
        return [
            artifact_keys.metadata_key(username, session_id),
            artifact_keys.annotations_key(username, session_id),
            artifact_keys.video_key(username, session_id, self.video_extension),
        ]

    async def _stored_video_keys(self, username: str, session_id: str) -> list[str]:
        """List every video key of a session, whatever its extension."""
        prefix = artifact_keys.category_prefix(username, ArtifactCategory.VIDEOS)
        keys = []
        for ref in await self.store.list_objects(prefix):
            try:
                if artifact_keys.canonical_session_id(ref.key, ArtifactCategory.VIDEOS) == session_id:
                    keys.append(ref.key)
            except MalformedTimestampError:
                continue
        return keys

    async def _delete_one(self, key: str) -> tuple[ArtifactOutcome, str | None]:
        try:
            await self.store.delete_object(key)
            return ArtifactOutcome.DELETED, None
        except ObjectNotFoundError:
            return ArtifactOutcome.MISSING, None
        except Exception as e:
            log_exception_with_context(logger, "Failed to delete artifact", e, key=key)
            return ArtifactOutcome.FAILED, str(e)

    async def delete_session(self, username: str, session_id: str) -> DeletionReport:
        """
        Delete all artifacts of one session.

        Videos are found by listing the user's videos prefix, so recordings
        uploaded with any video extension are removed. Missing keys count as
        already deleted. A failing key is logged and does not stop the others.

        Args:
            username: Owner namespace
            session_id: Session identifier

        Returns:
            DeletionReport: Per-key outcomes; `success` is False if any key
                failed or the videos prefix could not be listed

        Raises:
            MalformedTimestampError: session_id is not a session timestamp
        """
        keys = self.artifact_keys_for(username, session_id)
        session_id = timestamp_codec.ensure_canonical(session_id)
        report = DeletionReport(session_id=session_id)

        try:
            video_keys = await self._stored_video_keys(username, session_id)
        except ObjectStoreError as e:
            prefix = artifact_keys.category_prefix(username, ArtifactCategory.VIDEOS)
            log_exception_with_context(logger, "Failed to list session videos", e, key=prefix)
            report.outcomes[prefix] = ArtifactOutcome.FAILED
            report.errors[prefix] = str(e)
            video_keys = []
        # No stored video: the configured key is reported as missing
        keys = keys[:2] + (video_keys or keys[2:])

        results = await asyncio.gather(*(self._delete_one(key) for key in keys))
        for key, (outcome, error) in zip(keys, results):
            report.outcomes[key] = outcome
            if error is not None:
                report.errors[key] = error

        logger.info(
            f"{__name__}:delete_session - username={username} session_id={session_id} "
            f"success={report.success}"
        )
        return report

    async def provision_user(self, username: str) -> list[str]:
        """
        Create the empty folder markers of a user's namespace.

        Args:
            username: Owner namespace

        Returns:
            list[str]: Marker keys written

        Raises:
            ObjectStoreError: If any marker cannot be written
        """
        prefixes = [artifact_keys.category_prefix(username, category) for category in ArtifactCategory]
        await asyncio.gather(*(self.store.put_object(prefix, b"") for prefix in prefixes))
        logger.info(f"{__name__}:provision_user - Created S3 folders for {username}")
        return prefixes

    async def _upload_video(self, metadata: SessionMetadata, video_path: Path, report: UploadReport) -> None:
        extension = video_path.suffix.lower()
        if extension not in timestamp_codec.VIDEO_EXTENSIONS:
            extension = self.video_extension
        key = artifact_keys.video_key(metadata.username, metadata.session_id, extension)
        try:
            body = await asyncio.to_thread(video_path.read_bytes)
            await self.store.put_object(key, body, VIDEO_CONTENT_TYPES.get(extension, "application/octet-stream"))
            report.video_key = key
        except Exception as e:
            log_exception_with_context(logger, "Video upload failed", e, key=key)
            report.errors[key] = str(e)

    async def _upload_metadata(self, metadata: SessionMetadata, report: UploadReport) -> None:
        key = artifact_keys.metadata_key(metadata.username, metadata.session_id)
        try:
            report.metadata_key = await self.metadata_store.save(metadata)
        except Exception as e:
            log_exception_with_context(logger, "Metadata upload failed", e, key=key)
            report.errors[key] = str(e)

    async def upload_session(
        self,
        metadata: SessionMetadata,
        video_path: Path,
        timeout: float | None = None,
    ) -> UploadReport:
        """
        Upload a finished recording and its metadata.

        Both uploads run concurrently. When `timeout` expires the report
        holds whatever finished so far and `timed_out` is set.

        Args:
            metadata: Session metadata (title already set)
            video_path: Local recording to upload
            timeout: Budget in seconds for the whole sequence

        Returns:
            UploadReport: Keys written and per-key errors
        """
        report = UploadReport(session_id=metadata.session_id)
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    self._upload_video(metadata, Path(video_path), report),
                    self._upload_metadata(metadata, report),
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            report.timed_out = True
            logger.warning(
                f"{__name__}:upload_session - Timed out after {timeout}s "
                f"session_id={metadata.session_id}"
            )
        return report
