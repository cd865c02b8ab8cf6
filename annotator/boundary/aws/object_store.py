"""
Narrow object store interface.

The session engine only lists, reads, writes, deletes and presigns objects.
Components receive an ObjectStore at construction so tests can swap in a
fake.

Dependencies: pydantic
System role: Object store contract consumed by application services
"""

from datetime import datetime
from typing import Protocol

from pydantic import BaseModel


class RemoteObjectRef(BaseModel):
    """Object returned by a prefix listing."""

    key: str
    last_modified: datetime | None = None
    size: int = 0


class ObjectStore(Protocol):
    """
    Async object store operations.

    Implementations raise ObjectNotFoundError for absent objects and other
    ObjectStoreError subclasses for every other failure.
    """

    async def list_objects(self, prefix: str) -> list[RemoteObjectRef]: ...

    async def get_object(self, key: str) -> bytes: ...

    async def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> None: ...

    async def delete_object(self, key: str) -> None: ...

    async def generate_presigned_download_url(
        self,
        key: str,
        expires_in: int = 3600,
    ) -> tuple[str, datetime]: ...
