"""
Local video fallback configuration.

Directories scanned when a session's video never reached the bucket, and
the time windows used to match files against a session.

Dependencies: pydantic_settings
System role: Local fallback search configuration
"""

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_search_directories() -> list[Path]:
    """
    Platform default locations for recorded videos.

    Returns:
        list[Path]: ~/Movies on macOS or ~/Videos elsewhere, plus ./videos
    """
    home_folder = "Movies" if sys.platform == "darwin" else "Videos"
    return [Path.home() / home_folder, Path.cwd() / "videos"]


class LocalVideoSettings(BaseSettings):
    """Local video search and matching configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LOCAL_VIDEO_",
        case_sensitive=False,
        extra="ignore",
    )

    search_dirs: str | None = Field(
        default=None,
        description="os.pathsep separated override for the directories to scan",
    )
    tolerance_window_seconds: int = Field(
        default=300,
        description="Maximum distance between a file and the session start",
    )
    override_threshold_seconds: int = Field(
        default=300,
        description=(
            "Divergence between stored start time and session id above which "
            "the id wins when the local fallback is used"
        ),
    )
    upload_extension: str = Field(
        default=".mkv",
        description="Extension used for uploaded video keys",
    )
    index_build_timeout: float | None = Field(
        default=None,
        description="Budget in seconds for one session index build (None = unbounded)",
    )

    @property
    def search_directories(self) -> list[Path]:
        """
        Resolve the directories to scan.

        Returns:
            list[Path]: Override directories when set, else platform defaults
        """
        if self.search_dirs:
            return [
                Path(entry).expanduser()
                for entry in self.search_dirs.split(os.pathsep)
                if entry.strip()
            ]
        return default_search_directories()
