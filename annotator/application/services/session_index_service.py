"""
Session index builder.

Assembles browsable sessions for one user out of artifacts that were
uploaded independently:

1. List the metadata, annotations and videos prefixes concurrently.
2. Map each listing by canonical session id (malformed keys dropped).
3. Metadata presence defines the session universe.
4. Per session, newest id first: load metadata, presign the video (or fall
   back to a local file near the recording start), presign metadata and,
   when present, annotations.
5. Sort the result by effective video start, newest first.

Per-session failures are logged and skipped. Only a failure to list the
prefixes at all is raised.

Dependencies: annotator.boundary.aws, annotator.core, annotator.models.session
System role: Session listing and artifact reconciliation
"""

import asyncio
import logging
from datetime import timedelta

from annotator.application.services.metadata_service import parse_metadata
from annotator.boundary.aws.object_store import ObjectStore, RemoteObjectRef
from annotator.core import artifact_keys, timestamp_codec
from annotator.core.artifact_keys import ArtifactCategory
from annotator.core.exceptions import (
    AnnotatorException,
    MalformedTimestampError,
    SessionIndexUnavailableError,
)
from annotator.core.local_video_locator import LocalVideoLocator
from annotator.models.session import (
    PresignedReference,
    Session,
    SessionMetadata,
    VideoReference,
)
from annotator.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def index_by_session_id(
    refs: list[RemoteObjectRef],
    category: ArtifactCategory,
) -> dict[str, RemoteObjectRef]:
    """
    Map listed objects to their canonical session id.

    Keys that are not session artifacts (folder markers, stray files,
    malformed names) are dropped. If one session has several videos the
    most recently modified wins.

    Args:
        refs: Objects listed under one category prefix
        category: Category they were listed under

    Returns:
        dict[str, RemoteObjectRef]: Session id to object
    """
    mapping: dict[str, RemoteObjectRef] = {}
    for ref in refs:
        try:
            session_id = artifact_keys.canonical_session_id(ref.key, category)
        except MalformedTimestampError:
            logger.debug(f"{__name__}:index_by_session_id - Ignoring {ref.key}")
            continue

        existing = mapping.get(session_id)
        if existing is None or _newer(ref, existing):
            mapping[session_id] = ref
    return mapping


def _newer(candidate: RemoteObjectRef, existing: RemoteObjectRef) -> bool:
    if candidate.last_modified is None:
        return False
    if existing.last_modified is None:
        return True
    return candidate.last_modified > existing.last_modified


class SessionIndexBuilder:
    """Builds the ordered session list for a user."""

    def __init__(
        self,
        store: ObjectStore,
        locator: LocalVideoLocator,
        tolerance_window: timedelta = timedelta(minutes=5),
        override_threshold: timedelta | None = None,
        presigned_url_expiry: int = 3600,
    ) -> None:
        """
        Initialize session index builder.

        Args:
            store: Object store holding session artifacts
            locator: Local fallback search
            tolerance_window: Search window around the recording start
            override_threshold: Divergence between stored start and session id
                above which the id wins on local fallback (defaults to the window)
            presigned_url_expiry: Presigned URL lifetime in seconds
        """
        self.store = store
        self.locator = locator
        self.tolerance_window = tolerance_window
        self.override_threshold = tolerance_window if override_threshold is None else override_threshold
        self.presigned_url_expiry = presigned_url_expiry

    async def _list_categories(self, username: str) -> dict[ArtifactCategory, dict[str, RemoteObjectRef]]:
        categories = list(ArtifactCategory)
        try:
            listings = await asyncio.gather(
                *(
                    self.store.list_objects(artifact_keys.category_prefix(username, category))
                    for category in categories
                )
            )
        except AnnotatorException as e:
            raise SessionIndexUnavailableError(username, e) from e

        return {
            category: index_by_session_id(refs, category)
            for category, refs in zip(categories, listings)
        }

    async def _presign(self, ref: RemoteObjectRef | None) -> PresignedReference | None:
        if ref is None:
            return None
        url, expires_at = await self.store.generate_presigned_download_url(
            ref.key, expires_in=self.presigned_url_expiry
        )
        return PresignedReference(url=url, expires_at=expires_at)

    async def _resolve_local_video(
        self,
        session_id: str,
        metadata: SessionMetadata,
    ) -> tuple[VideoReference, int] | None:
        """
        Find a local recording for a session and its effective start time.

        Returns:
            tuple[VideoReference, int] | None: Local reference and effective
                start (epoch ms), or None if nothing matched
        """
        id_instant = timestamp_codec.parse(session_id)
        id_millis = timestamp_codec.to_epoch_millis(id_instant)
        stored = metadata.video_start_timestamp

        target = id_instant if stored is None else timestamp_codec.from_epoch_millis(stored)
        candidate = await self.locator.find_closest(target, self.tolerance_window)
        if candidate is None:
            return None

        effective = stored
        if stored is None or abs(stored - id_millis) > self.override_threshold.total_seconds() * 1000:
            effective = id_millis
            logger.info(
                f"{__name__}:_resolve_local_video - Using session id time for {session_id} "
                f"(stored={stored})"
            )

        reference = VideoReference(kind="local", location=str(candidate.path))
        return reference, effective

    async def _assemble(
        self,
        session_id: str,
        metadata_ref: RemoteObjectRef,
        video_ref: RemoteObjectRef | None,
        annotation_ref: RemoteObjectRef | None,
    ) -> Session | None:
        """Assemble one session, or None if it cannot be shown."""
        try:
            metadata = parse_metadata(await self.store.get_object(metadata_ref.key), metadata_ref.key)
        except AnnotatorException as e:
            log_exception_with_context(
                logger, "Skipping session with unreadable metadata", e, session_id=session_id
            )
            return None

        video_result, metadata_result, annotation_result = await asyncio.gather(
            self._presign(video_ref),
            self._presign(metadata_ref),
            self._presign(annotation_ref),
            return_exceptions=True,
        )

        effective = metadata.video_start_timestamp or 0
        if isinstance(video_result, PresignedReference):
            video = VideoReference(
                kind="remote", location=video_result.url, expires_at=video_result.expires_at
            )
        else:
            if isinstance(video_result, BaseException):
                log_exception_with_context(
                    logger, "Video presign failed, trying local fallback", video_result,
                    session_id=session_id,
                )
            local = await self._resolve_local_video(session_id, metadata)
            if local is None:
                logger.info(f"{__name__}:_assemble - No video for {session_id}, skipping")
                return None
            video, effective = local

        if isinstance(metadata_result, BaseException):
            log_exception_with_context(
                logger, "Skipping session, metadata presign failed", metadata_result,
                session_id=session_id,
            )
            return None

        if isinstance(annotation_result, BaseException):
            log_exception_with_context(
                logger, "Annotation presign failed, listing without annotations",
                annotation_result, session_id=session_id,
            )
            annotation_result = None

        return Session(
            session_id=session_id,
            title=metadata.title,
            effective_video_start_timestamp=effective,
            video_reference=video,
            metadata_reference=metadata_result,
            annotation_reference=annotation_result,
        )

    async def _collect(self, username: str, sessions: list[Session]) -> None:
        indexed = await self._list_categories(username)
        metadata_refs = indexed[ArtifactCategory.METADATA]
        video_refs = indexed[ArtifactCategory.VIDEOS]
        annotation_refs = indexed[ArtifactCategory.ANNOTATIONS]

        session_ids = sorted(metadata_refs, key=timestamp_codec.parse, reverse=True)
        logger.info(
            f"{__name__}:_collect - username={username} metadata={len(metadata_refs)} "
            f"videos={len(video_refs)} annotations={len(annotation_refs)}"
        )

        for session_id in session_ids:
            try:
                session = await self._assemble(
                    session_id,
                    metadata_refs[session_id],
                    video_refs.get(session_id),
                    annotation_refs.get(session_id),
                )
            except Exception as e:
                log_exception_with_context(
                    logger, "Skipping session after unexpected error", e, session_id=session_id
                )
                continue
            if session is not None:
                sessions.append(session)

    async def build(self, username: str, timeout: float | None = None) -> list[Session]:
        """
        Build the session list for a user, newest first.

        Args:
            username: Owner namespace
            timeout: Budget in seconds; on expiry the sessions assembled so
                far are returned

        Returns:
            list[Session]: Sessions sorted by effective start, descending

        Raises:
            SessionIndexUnavailableError: Prefixes could not be listed
        """
        sessions: list[Session] = []
        try:
            await asyncio.wait_for(self._collect(username, sessions), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"{__name__}:build - Timed out after {timeout}s, returning {len(sessions)} sessions"
            )

        return sorted(sessions, key=lambda s: s.effective_video_start_timestamp, reverse=True)
