"""
Unit tests for the local video locator.

Tests window filtering, closest match selection, tie breaking and the
modification-time fallback.
Dependencies: pytest, pytest-asyncio, annotator.core.local_video_locator
System role: Local fallback search validation
"""

import os
import threading
from datetime import timedelta
from pathlib import Path

import pytest

from annotator.core import local_video_locator, timestamp_codec
from annotator.core.exceptions import LocalScanUnavailableError
from annotator.core.local_video_locator import LocalVideoLocator, build_candidate, scan_directory

TARGET = timestamp_codec.parse("2025-08-19 22-13-32")


def touch_video(directory: Path, offset: timedelta, extension: str = ".mkv") -> Path:
    """Create a video file named after TARGET + offset."""
    path = directory / f"{timestamp_codec.format(TARGET + offset)}{extension}"
    path.write_bytes(b"\x1a\x45\xdf\xa3")
    return path


@pytest.fixture
def locator(video_dir: Path) -> LocalVideoLocator:
    """Provide locator scanning the temp video directory."""
    return LocalVideoLocator([video_dir], tolerance_window=timedelta(minutes=5))


class TestFindClosest:
    """Test suite for LocalVideoLocator.find_closest."""

    @pytest.mark.asyncio
    async def test_returns_closest_candidate_inside_window(self, locator, video_dir) -> None:
        """
        Test closest in-window file wins.

        Arrange: Files at -10min, +2min, +4min
        Act: Search with a 5 minute window
        Assert: The +2min file is returned
        """
        touch_video(video_dir, timedelta(minutes=-10))
        expected = touch_video(video_dir, timedelta(minutes=2))
        touch_video(video_dir, timedelta(minutes=4), ".mp4")

        candidate = await locator.find_closest(TARGET, timedelta(minutes=5))

        assert candidate is not None
        assert candidate.path == expected.resolve()
        assert candidate.used_filename_parsing is True
        assert candidate.delta_seconds == 120

    @pytest.mark.asyncio
    async def test_returns_none_when_nothing_inside_window(self, locator, video_dir) -> None:
        """Test a 1 minute window excludes the same candidates."""
        touch_video(video_dir, timedelta(minutes=-10))
        touch_video(video_dir, timedelta(minutes=2))
        touch_video(video_dir, timedelta(minutes=4))

        assert await locator.find_closest(TARGET, timedelta(minutes=1)) is None

    @pytest.mark.asyncio
    async def test_window_boundary_is_inclusive(self, locator, video_dir) -> None:
        expected = touch_video(video_dir, timedelta(minutes=5))

        candidate = await locator.find_closest(TARGET, timedelta(minutes=5))

        assert candidate is not None and candidate.path == expected.resolve()

    @pytest.mark.asyncio
    async def test_ties_go_to_lexicographically_first_name(self, locator, video_dir) -> None:
        """Test equidistant files resolve deterministically by file name."""
        later = touch_video(video_dir, timedelta(minutes=2))
        earlier = touch_video(video_dir, timedelta(minutes=-2))
        assert earlier.name < later.name

        candidate = await locator.find_closest(TARGET)

        assert candidate is not None
        assert candidate.path == earlier.resolve()

    @pytest.mark.asyncio
    async def test_falls_back_to_modification_time(self, locator, video_dir) -> None:
        """Test files without a timestamp name use their mtime."""
        path = video_dir / "Screen Recording.mov"
        path.write_bytes(b"")
        mtime = (TARGET + timedelta(seconds=30)).timestamp()
        os.utime(path, (mtime, mtime))

        candidate = await locator.find_closest(TARGET)

        assert candidate is not None
        assert candidate.path == path.resolve()
        assert candidate.used_filename_parsing is False
        assert candidate.delta_seconds == pytest.approx(30, abs=1)

    @pytest.mark.asyncio
    async def test_ignores_non_video_files_and_subdirectories(self, locator, video_dir) -> None:
        (video_dir / f"{timestamp_codec.format(TARGET)}.json").write_text("[]")
        (video_dir / f"{timestamp_codec.format(TARGET)}.txt").write_text("notes")
        nested = video_dir / "nested"
        nested.mkdir()
        touch_video(nested, timedelta(0))

        assert await locator.find_closest(TARGET) is None

    @pytest.mark.asyncio
    async def test_skips_missing_directories(self, video_dir, tmp_path) -> None:
        """Test an absent directory is skipped, not fatal."""
        expected = touch_video(video_dir, timedelta(seconds=10))
        locator = LocalVideoLocator([tmp_path / "does-not-exist", video_dir])

        candidate = await locator.find_closest(TARGET)

        assert candidate is not None and candidate.path == expected.resolve()

    @pytest.mark.asyncio
    async def test_searches_every_directory(self, tmp_path) -> None:
        first = tmp_path / "Movies"
        second = tmp_path / "videos"
        first.mkdir()
        second.mkdir()
        touch_video(first, timedelta(minutes=3))
        expected = touch_video(second, timedelta(minutes=1))
        locator = LocalVideoLocator([first, second])

        candidate = await locator.find_closest(TARGET)

        assert candidate is not None and candidate.path == expected.resolve()

    @pytest.mark.asyncio
    async def test_explicit_directories_override_defaults(self, locator, tmp_path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        expected = touch_video(other, timedelta(0))

        candidate = await locator.find_closest(TARGET, search_directories=[other])

        assert candidate is not None and candidate.path == expected.resolve()

    @pytest.mark.asyncio
    async def test_relative_directory_yields_absolute_path(self, video_dir, monkeypatch) -> None:
        monkeypatch.chdir(video_dir.parent)
        touch_video(video_dir, timedelta(0))

        candidate = await LocalVideoLocator([Path(video_dir.name)]).find_closest(TARGET)

        assert candidate is not None
        assert candidate.path.is_absolute()

    @pytest.mark.asyncio
    async def test_file_stats_run_off_the_event_loop(self, locator, video_dir, monkeypatch) -> None:
        """Test per-file stat and resolve happen in the worker thread, not the loop thread."""
        touch_video(video_dir, timedelta(0))
        loop_thread = threading.get_ident()
        seen_threads = []

        def recording_build(path, target):
            seen_threads.append(threading.get_ident())
            return build_candidate(path, target)

        monkeypatch.setattr(local_video_locator, "build_candidate", recording_build)

        candidate = await locator.find_closest(TARGET)

        assert candidate is not None
        assert seen_threads and loop_thread not in seen_threads

    @pytest.mark.asyncio
    async def test_no_directories_returns_none(self) -> None:
        assert await LocalVideoLocator([]).find_closest(TARGET) is None


def test_scan_directory_raises_for_missing_directory(tmp_path) -> None:
    with pytest.raises(LocalScanUnavailableError):
        scan_directory(tmp_path / "missing")
