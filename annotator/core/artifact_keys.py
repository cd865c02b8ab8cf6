"""
Artifact key scheme.

Format: {username}/{category}/{session_id}.{ext}

Keys are bit-exact with previously stored data; every session artifact
lives under its owner's username prefix.

Dependencies: annotator.core.timestamp_codec
System role: Object key construction and canonical id extraction
"""

from enum import Enum

from annotator.core import timestamp_codec
from annotator.core.exceptions import MalformedTimestampError


class ArtifactCategory(str, Enum):
    """Artifact folders under a user's prefix."""

    METADATA = "metadata"
    ANNOTATIONS = "annotations"
    VIDEOS = "videos"


def category_prefix(username: str, category: ArtifactCategory) -> str:
    """
    Prefix listing every artifact of one category for a user.

    Args:
        username: Owner namespace
        category: Artifact category

    Returns:
        str: `{username}/{category}/`
    """
    return f"{username}/{category.value}/"


def metadata_key(username: str, session_id: str) -> str:
    return f"{category_prefix(username, ArtifactCategory.METADATA)}{session_id}.json"


def annotations_key(username: str, session_id: str) -> str:
    return f"{category_prefix(username, ArtifactCategory.ANNOTATIONS)}{session_id}.json"


def video_key(username: str, session_id: str, extension: str = ".mkv") -> str:
    if not extension.startswith("."):
        extension = f".{extension}"
    return f"{category_prefix(username, ArtifactCategory.VIDEOS)}{session_id}{extension.lower()}"


def canonical_session_id(key: str, category: ArtifactCategory) -> str:
    """
    Extract the session id an artifact key belongs to.

    Folder markers, keys with the wrong extension for their category and
    basenames that are not session timestamps are all rejected.

    Args:
        key: Full object key
        category: Category the key was listed under

    Returns:
        str: Canonical `YYYY-MM-DD HH-MM-SS` session id

    Raises:
        MalformedTimestampError: Key does not name a session artifact
    """
    basename = key.rsplit("/", 1)[-1]
    dot = basename.rfind(".")
    extension = basename[dot:].lower() if dot != -1 else ""

    if category is ArtifactCategory.VIDEOS:
        allowed = extension in timestamp_codec.VIDEO_EXTENSIONS
    else:
        allowed = extension == timestamp_codec.JSON_EXTENSION
    if not allowed:
        raise MalformedTimestampError(basename, f"unexpected extension for {category.value}")

    return timestamp_codec.ensure_canonical(basename[:dot])
