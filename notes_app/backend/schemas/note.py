"""
Note Schemas.

Pydantic schemas for note API request/response validation.

Create is forgiving about optional fields (bad content or tags fall back
to their defaults). Update coerces scalar title and content to text but
rejects an empty title and non-array tags.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from notes_app.backend.models.note import normalize_tags
from notes_app.backend.schemas.base import CamelModel, to_utc_iso

_FALSY = ("", 0, False)


def _is_falsy(value: Any) -> bool:
    return value is None or (isinstance(value, (str, int, float)) and value in _FALSY)


def scalar_text(value: Any) -> Any:
    """Render a JSON scalar as text; other values pass through unchanged."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["Shopping"],
    )
    content: str = Field(
        default="",
        description="Note content",
        examples=["Milk, eggs, bread"],
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Ordered tags; duplicates are kept",
        examples=[["home", "errands"]],
    )
    is_archived: bool = Field(
        default=False,
        description="Archive status",
    )

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return normalize_tags(value)

    @field_validator("is_archived", mode="before")
    @classmethod
    def coerce_archived(cls, value: Any) -> bool:
        return bool(value)


class NoteUpdate(CamelModel):
    """
    Schema for updating an existing note.

    Only fields present in the request body are applied; use
    model_dump(exclude_unset=True) to get them.
    """

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Note content",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Replacement tag list",
    )
    is_archived: bool | None = Field(
        default=None,
        description="Archive status",
    )

    @field_validator("title", mode="before")
    @classmethod
    def reject_empty_title(cls, value: Any) -> Any:
        if _is_falsy(value):
            raise ValueError("title cannot be empty")
        return scalar_text(value)

    @field_validator("content", mode="before")
    @classmethod
    def content_as_text(cls, value: Any) -> Any:
        return "" if _is_falsy(value) else scalar_text(value)

    @field_validator("tags", mode="before")
    @classmethod
    def require_array(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            raise ValueError("tags must be an array")
        return normalize_tags(value)

    @field_validator("is_archived", mode="before")
    @classmethod
    def coerce_archived(cls, value: Any) -> bool:
        return bool(value)


class NoteResponse(CamelModel):
    """Schema for note in API responses."""

    id: int = Field(description="Note identifier")
    user_id: int = Field(description="Owner identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    tags: list[str] = Field(description="Note tags")
    is_archived: bool = Field(description="Whether the note is archived")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    @field_validator("content", mode="before")
    @classmethod
    def content_or_empty(cls, value: Any) -> str:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def tags_as_list(cls, value: Any) -> list[str]:
        return normalize_tags(value)

    @field_validator("is_archived", mode="before")
    @classmethod
    def archived_as_bool(cls, value: Any) -> bool:
        return bool(value)

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_utc_iso(value)


class NoteEnvelope(BaseModel):
    """Single note response body."""

    note: NoteResponse


class NoteListEnvelope(BaseModel):
    """Note listing response body."""

    notes: list[NoteResponse]
