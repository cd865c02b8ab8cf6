"""
Session domain models and schemas.

Stored metadata document, assembled session view and lifecycle reports.
Wire names are camelCase to stay compatible with stored documents.

Dependencies: pydantic
System role: Session document and API contracts
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from annotator.core import timestamp_codec
from annotator.core.exceptions import MalformedTimestampError

METADATA_SCHEMA_VERSION = 1


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionMetadata(CamelModel):
    """Per-session metadata document stored at `{username}/metadata/{id}.json`."""

    schema_version: int = Field(default=METADATA_SCHEMA_VERSION)
    username: str
    title: str = ""
    session_id: str
    video_start_timestamp: int | None = Field(
        default=None,
        description="Recording start, epoch milliseconds (unset before recording starts)",
    )

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_document(cls, data: Any) -> Any:
        """Upgrade documents written before `sessionId` and `schemaVersion` existed."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "fileTimestamp" in data and "sessionId" not in data and "session_id" not in data:
            data["sessionId"] = data.pop("fileTimestamp")
        version = data.get("schemaVersion", data.get("schema_version", METADATA_SCHEMA_VERSION))
        if not isinstance(version, int) or version > METADATA_SCHEMA_VERSION:
            raise ValueError(f"Unsupported metadata schemaVersion: {version!r}")
        return data

    @field_validator("session_id")
    @classmethod
    def validate_session_id(cls, value: str) -> str:
        try:
            return timestamp_codec.ensure_canonical(value)
        except MalformedTimestampError as e:
            raise ValueError(e.message) from e

    @classmethod
    def start(cls, username: str, title: str = "") -> "SessionMetadata":
        """
        Create metadata for a session starting now.

        Args:
            username: Owner namespace
            title: Optional title, usually set once recording stops

        Returns:
            SessionMetadata: New document stamped with the current local time
        """
        now = datetime.now().astimezone().replace(microsecond=0)
        return cls(
            username=username,
            title=title,
            session_id=timestamp_codec.format(now),
            video_start_timestamp=timestamp_codec.to_epoch_millis(now),
        )

    def to_document(self) -> bytes:
        """Serialize the stored JSON document."""
        return self.model_dump_json(by_alias=True, indent=3).encode("utf-8")


class VideoReference(CamelModel):
    """Where a session's video can be played from."""

    kind: Literal["remote", "local"]
    location: str = Field(description="Presigned URL or absolute local path")
    expires_at: datetime | None = None


class PresignedReference(CamelModel):
    """Time-bounded link to a stored object."""

    url: str
    expires_at: datetime


class Session(CamelModel):
    """Assembled, read-only view of one recorded session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    session_id: str
    title: str
    effective_video_start_timestamp: int
    video_reference: VideoReference
    metadata_reference: PresignedReference
    annotation_reference: PresignedReference | None = None


class LocalVideoCandidate(BaseModel):
    """Local file considered by the fallback search."""

    path: Path
    derived_timestamp: datetime
    file_modified_time: datetime
    used_filename_parsing: bool
    delta_seconds: float = Field(ge=0)


class ArtifactOutcome(str, Enum):
    """Result of deleting one artifact key."""

    DELETED = "deleted"
    MISSING = "missing"
    FAILED = "failed"


class DeletionReport(CamelModel):
    """Per-key outcome of deleting one session."""

    session_id: str
    outcomes: dict[str, ArtifactOutcome] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)

    @computed_field
    @property
    def success(self) -> bool:
        return all(outcome is not ArtifactOutcome.FAILED for outcome in self.outcomes.values())


class UploadReport(CamelModel):
    """Outcome of the stop-and-upload sequence."""

    session_id: str
    metadata_key: str | None = None
    video_key: str | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    timed_out: bool = False

    @computed_field
    @property
    def complete(self) -> bool:
        return self.metadata_key is not None and self.video_key is not None and not self.errors


class SessionResponse(CamelModel):
    """Response schema for the session index."""

    sessions: list[Session]
    total: int
