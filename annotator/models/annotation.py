"""
Annotation domain models.

One annotation log per session, stored as a JSON array of entries.

Dependencies: pydantic
System role: Annotation log document schema
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class AnnotationEntry(BaseModel):
    """A note taken at one moment of a recording."""

    # Fields written by other clients survive read-modify-write
    model_config = ConfigDict(extra="allow")

    note: str = Field(description="Free-form note text")
    timestamp: int = Field(description="Moment of the note, epoch milliseconds")


AnnotationLog = TypeAdapter(list[AnnotationEntry])


class CreateAnnotationRequest(BaseModel):
    """Request schema for appending an annotation."""

    note: str
    timestamp: int
