"""
Local video locator.

Last-resort source for a session's video when the upload never reached
the bucket. Scans the configured directories (non-recursively) for video
files and picks the one closest to the session start inside a tolerance
window, so unrelated recordings are never matched.

A file's instant comes from its name when it is a session timestamp
(`2025-08-19 22-13-32.mkv`), otherwise from its modification time.

Dependencies: annotator.core.timestamp_codec
System role: Local fallback search for the session index
"""

import asyncio
import logging
from datetime import datetime, timedelta
from pathlib import Path

from annotator.core import timestamp_codec
from annotator.core.exceptions import LocalScanUnavailableError, MalformedTimestampError
from annotator.models.session import LocalVideoCandidate
from annotator.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def scan_directory(directory: Path) -> list[Path]:
    """
    List video files directly inside a directory.

    Args:
        directory: Directory to scan

    Returns:
        list[Path]: Files with a recognized video extension

    Raises:
        LocalScanUnavailableError: Directory missing or unreadable
    """
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise LocalScanUnavailableError(str(directory), e.strerror or str(e)) from e

    videos = []
    for entry in entries:
        if entry.suffix.lower() not in timestamp_codec.VIDEO_EXTENSIONS:
            continue
        try:
            if entry.is_file():
                videos.append(entry)
        except OSError:
            continue
    return videos


def build_candidate(path: Path, target: datetime) -> LocalVideoCandidate | None:
    """
    Derive the instant of one file and its distance to the target.

    Args:
        path: Video file
        target: Aware target instant

    Returns:
        LocalVideoCandidate | None: None if the file vanished or cannot be stat'ed
    """
    try:
        modified = datetime.fromtimestamp(path.stat().st_mtime).astimezone()
        resolved = path.resolve()
    except OSError:
        return None

    try:
        derived = timestamp_codec.parse(path.name)
        used_filename_parsing = True
    except MalformedTimestampError:
        derived = modified
        used_filename_parsing = False

    return LocalVideoCandidate(
        path=resolved,
        derived_timestamp=derived,
        file_modified_time=modified,
        used_filename_parsing=used_filename_parsing,
        delta_seconds=abs((derived - target).total_seconds()),
    )


def collect_candidates(directory: Path, target: datetime) -> list[LocalVideoCandidate]:
    """
    Scan one directory and measure every video file in it against `target`.

    All filesystem access happens here so callers can run it in a worker thread.

    Raises:
        LocalScanUnavailableError: Directory missing or unreadable
    """
    candidates = []
    for path in scan_directory(directory):
        candidate = build_candidate(path, target)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


class LocalVideoLocator:
    """Finds the local video file closest to a session start."""

    def __init__(
        self,
        search_directories: list[Path],
        tolerance_window: timedelta = timedelta(minutes=5),
    ) -> None:
        """
        Initialize locator.

        Args:
            search_directories: Default directories to scan
            tolerance_window: Default maximum distance to the target instant
        """
        self.search_directories = list(search_directories)
        self.tolerance_window = tolerance_window

    async def _collect(self, directory: Path, target: datetime) -> list[LocalVideoCandidate]:
        try:
            return await asyncio.to_thread(collect_candidates, directory, target)
        except LocalScanUnavailableError as e:
            log_exception_with_context(
                logger, "Skipping local video directory", e,
                level=logging.DEBUG, directory=str(directory),
            )
            return []

    async def find_closest(
        self,
        target: datetime,
        window: timedelta | None = None,
        search_directories: list[Path] | None = None,
    ) -> LocalVideoCandidate | None:
        """
        Find the video file closest to `target` within `window`.

        Ties on distance go to the lexicographically first file name.

        Args:
            target: Instant to match (naive = local time)
            window: Maximum distance (defaults to the locator's window)
            search_directories: Directories to scan (defaults to the locator's)

        Returns:
            LocalVideoCandidate | None: Closest match, or None if nothing fits
        """
        window = self.tolerance_window if window is None else window
        directories = self.search_directories if search_directories is None else search_directories
        if target.tzinfo is None:
            target = target.astimezone()

        listings = await asyncio.gather(*(self._collect(Path(d), target) for d in directories))

        candidates = [
            candidate
            for listing in listings
            for candidate in listing
            if candidate.delta_seconds <= window.total_seconds()
        ]

        if not candidates:
            logger.debug(
                f"{__name__}:find_closest - No local video within {window} of {target.isoformat()}"
            )
            return None

        best = min(candidates, key=lambda c: (c.delta_seconds, c.path.name, str(c.path)))
        logger.info(
            f"{__name__}:find_closest - Matched {best.path} "
            f"delta={best.delta_seconds:.0f}s filename_parsed={best.used_filename_parsing}"
        )
        return best
