"""
Note Model.

Database model for notes. Each note has exactly one owner; tags are an
ordered JSON array of strings.
"""

import json
from typing import Any

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, func, literal_column
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.types import JSON, TypeDecorator, TypeEngine

from notes_app.backend.models.base import Base, IntegerIdMixin, TimestampMixin

TEXT_SEARCH_CONFIG = "english"


def normalize_tags(raw: Any) -> list[str]:
    """
    Decode a stored tags value into a list of strings.

    Anything that is not a JSON array (including undecodable text)
    becomes an empty list so a corrupt row stays readable.
    """
    if raw is None:
        return []
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    if not isinstance(raw, list):
        return []
    return [tag if isinstance(tag, str) else str(tag) for tag in raw if tag is not None]


class TagList(TypeDecorator):
    """
    JSON array of strings.

    Native JSON types are used where the backend has them (JSONB on
    PostgreSQL, JSON on MySQL); other backends store the serialized
    array as text.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        if dialect.name == "mysql":
            return dialect.type_descriptor(JSON())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        tags = list(value) if value else []
        if dialect.name in ("postgresql", "mysql"):
            return tags
        return json.dumps(tags)

    def process_result_value(self, value: Any, dialect: Dialect) -> list[str]:
        return normalize_tags(value)


class Note(IntegerIdMixin, TimestampMixin, Base):
    """
    Note database model.

    Notes are only ever addressed together with their owner's id.
    """

    __tablename__ = "notes"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    tags: Mapped[list[str]] = mapped_column(
        TagList,
        nullable=True,
        default=list,
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user_id={self.user_id}, title={self.title!r})>"


def search_document(title: Any, content: Any) -> ColumnElement[Any]:
    """PostgreSQL tsvector over title and content; shared by the GIN index and queries."""
    return func.to_tsvector(
        literal_column(f"'{TEXT_SEARCH_CONFIG}'::regconfig"),
        title.concat(literal_column("' '")).concat(content),
    )


Index("ix_notes_user_archived", Note.user_id, Note.is_archived)

Index(
    "ix_notes_search",
    search_document(Note.title, Note.content),
    postgresql_using="gin",
).ddl_if(dialect="postgresql")

Index(
    "ix_notes_fulltext",
    Note.title,
    Note.content,
    mysql_prefix="FULLTEXT",
).ddl_if(dialect="mysql")
