"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory object store fake with failure injection, session
id helpers, temp video directories
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from urllib.parse import quote

import pytest

from annotator.boundary.aws.object_store import RemoteObjectRef
from annotator.core import timestamp_codec
from annotator.core.exceptions import (
    ObjectNotFoundError,
    ObjectStoreError,
    PresignError,
    TransientStoreError,
)


class FakeObjectStore:
    """
    In-memory ObjectStore.

    Every call yields to the event loop once before touching state so
    concurrent read-modify-write sequences interleave like real round trips.
    """

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.modified: dict[str, datetime] = {}
        self.fail_list = False
        self.fail_get: set[str] = set()
        self.fail_put: set[str] = set()
        self.fail_delete: set[str] = set()
        self.fail_presign: set[str] = set()
        self.delays: dict[str, float] = {}
        self.calls: list[tuple[str, str]] = []

    async def _tick(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        await asyncio.sleep(self.delays.get(key, 0))

    def seed(self, key: str, body: bytes | str | list | dict) -> None:
        if isinstance(body, (list, dict)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.objects[key] = body
        self.modified[key] = datetime.now(timezone.utc)

    async def list_objects(self, prefix: str) -> list[RemoteObjectRef]:
        await self._tick("list", prefix)
        if self.fail_list:
            raise TransientStoreError("listing throttled", "list", prefix)
        return [
            RemoteObjectRef(key=key, last_modified=self.modified.get(key), size=len(body))
            for key, body in sorted(self.objects.items())
            if key.startswith(prefix)
        ]

    async def get_object(self, key: str) -> bytes:
        await self._tick("get", key)
        if key in self.fail_get:
            raise ObjectStoreError("read failed", "get", key)
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        return self.objects[key]

    async def put_object(self, key: str, body: bytes, content_type: str = "application/octet-stream") -> None:
        await self._tick("put", key)
        if key in self.fail_put:
            raise ObjectStoreError("write failed", "put", key)
        self.objects[key] = body
        self.modified[key] = datetime.now(timezone.utc)

    async def delete_object(self, key: str) -> None:
        await self._tick("delete", key)
        if key in self.fail_delete:
            raise ObjectStoreError("access denied", "delete", key)
        if key not in self.objects:
            raise ObjectNotFoundError(key, "delete")
        del self.objects[key]

    async def generate_presigned_download_url(self, key: str, expires_in: int = 3600) -> tuple[str, datetime]:
        await self._tick("presign", key)
        if key in self.fail_presign:
            raise PresignError(key, "no credentials")
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return f"https://bucket.example.test/{quote(key)}?X-Amz-Expires={expires_in}", expires_at


def metadata_doc(username: str, session_id: str, title: str = "", start: int | None = None) -> dict:
    """Stored metadata document as written by the recorder."""
    return {
        "username": username,
        "title": title,
        "sessionId": session_id,
        "videoStartTimestamp": start,
    }


def millis(session_id: str) -> int:
    """Epoch milliseconds of a session id."""
    return timestamp_codec.to_epoch_millis(timestamp_codec.parse(session_id))


@pytest.fixture
def store() -> FakeObjectStore:
    """Provide empty in-memory object store."""
    return FakeObjectStore()


@pytest.fixture
def username() -> str:
    return "alice"


@pytest.fixture
def session_id() -> str:
    """Provide a fixed session id."""
    return "2025-08-19 22-13-32"


@pytest.fixture
def video_dir(tmp_path: Path) -> Path:
    """Provide an empty local video directory."""
    directory = tmp_path / "Videos"
    directory.mkdir()
    return directory


@pytest.fixture
def make_metadata():
    """Provide factory for stored metadata documents."""
    return metadata_doc


@pytest.fixture
def to_millis():
    """Provide session id to epoch milliseconds converter."""
    return millis
