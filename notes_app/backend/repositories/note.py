"""
Note Repository.

Data access layer for notes. Every statement here is scoped by the
owner's user id, and every user-supplied value travels as a bound
parameter. The list query is assembled from small predicate functions
so each dialect can contribute its own tag and full-text matching.
"""

import enum
from dataclasses import dataclass
from typing import Any

from sqlalchemy import (
    ColumnElement,
    Select,
    case,
    delete,
    func,
    literal_column,
    or_,
    select,
    text,
    type_coerce,
    update,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.backend.core.pagination import clamp_limit, clamp_offset
from notes_app.backend.core.utils import utc_now
from notes_app.backend.models.note import TEXT_SEARCH_CONFIG, Note, search_document
from notes_app.backend.repositories.base import BaseRepository


class SortField(str, enum.Enum):
    """Columns a note listing may be ordered by."""

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TITLE = "title"

    @classmethod
    def parse(cls, value: Any) -> "SortField":
        """Map a requested sort key onto the whitelist; unknown keys sort by updatedAt."""
        if isinstance(value, str):
            key = value.strip()
            if key in _SORT_ALIASES:
                return _SORT_ALIASES[key]
        return cls.UPDATED_AT

    @property
    def column(self) -> Any:
        return {
            SortField.CREATED_AT: Note.created_at,
            SortField.UPDATED_AT: Note.updated_at,
            SortField.TITLE: Note.title,
        }[self]


_SORT_ALIASES: dict[str, SortField] = {
    "createdAt": SortField.CREATED_AT,
    "created_at": SortField.CREATED_AT,
    "updatedAt": SortField.UPDATED_AT,
    "updated_at": SortField.UPDATED_AT,
    "title": SortField.TITLE,
}


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        if isinstance(value, str) and value.strip().lower() == "asc":
            return cls.ASC
        return cls.DESC


@dataclass
class NoteListOptions:
    """
    Filters, ordering and window for a note listing.

    Raw request values may be passed straight in; they are normalized on
    construction so the repository only ever sees safe values.
    """

    search: str | None = None
    tag: str | None = None
    archived: bool | None = None
    sort_by: SortField | str | None = SortField.UPDATED_AT
    sort_dir: SortDirection | str | None = SortDirection.DESC
    limit: Any = None
    offset: Any = None

    def __post_init__(self) -> None:
        blank = not isinstance(self.search, str) or not self.search.strip()
        self.search = None if blank else self.search
        self.tag = self.tag if isinstance(self.tag, str) and self.tag != "" else None
        self.sort_by = SortField.parse(self.sort_by)
        self.sort_dir = SortDirection.parse(self.sort_dir)
        self.limit = clamp_limit(self.limit)
        self.offset = clamp_offset(self.offset)


# =============================================================================
# Predicates
# =============================================================================


def owner_predicate(user_id: int) -> ColumnElement[bool]:
    return Note.user_id == user_id


def archived_predicate(archived: bool) -> ColumnElement[bool]:
    return Note.is_archived == archived


def tag_predicate(tag: str, dialect_name: str) -> ColumnElement[bool]:
    """Exact membership of tag in the stored array."""
    if dialect_name == "postgresql":
        return type_coerce(Note.tags, JSONB).contains([tag])
    if dialect_name == "mysql":
        return func.json_contains(Note.tags, func.json_quote(tag)) == 1

    # Rows holding anything but a JSON array are iterated as an empty array.
    # json_type raises on malformed text, so validity is checked first.
    document = case(
        (func.coalesce(func.json_valid(Note.tags), 0) != 1, literal_column("'[]'")),
        (func.json_type(Note.tags) == "array", Note.tags),
        else_=literal_column("'[]'"),
    )
    elements = func.json_each(document).table_valued("value")
    return select(elements.c.value).where(elements.c.value == tag).exists()


def relevance_predicate(term: str, dialect_name: str) -> ColumnElement[bool] | None:
    """Full-text match on title and content, or None where no text index exists."""
    if dialect_name == "postgresql":
        query = func.plainto_tsquery(
            literal_column(f"'{TEXT_SEARCH_CONFIG}'::regconfig"),
            term,
        )
        return search_document(Note.title, Note.content).op("@@")(query)
    if dialect_name == "mysql":
        return text(
            "MATCH (notes.title, notes.content) AGAINST (:search_term IN BOOLEAN MODE)"
        ).bindparams(search_term=f"{term}*")
    return None


def search_predicate(term: str, dialect_name: str) -> ColumnElement[bool]:
    """Relevance match OR case-insensitive substring on title or content."""
    clauses: list[Any] = []
    relevance = relevance_predicate(term, dialect_name)
    if relevance is not None:
        clauses.append(relevance)
    clauses.append(Note.title.icontains(term, autoescape=True))
    clauses.append(Note.content.icontains(term, autoescape=True))
    return or_(*clauses)


def build_list_query(
    user_id: int,
    options: NoteListOptions,
    dialect_name: str,
) -> Select[tuple[Note]]:
    """Compose the owner-scoped listing statement for the given dialect."""
    stmt = select(Note).where(owner_predicate(user_id))

    if options.archived is not None:
        stmt = stmt.where(archived_predicate(options.archived))
    if options.tag is not None:
        stmt = stmt.where(tag_predicate(options.tag, dialect_name))
    if options.search is not None:
        stmt = stmt.where(search_predicate(options.search, dialect_name))

    column = SortField.parse(options.sort_by).column
    if SortDirection.parse(options.sort_dir) is SortDirection.ASC:
        stmt = stmt.order_by(column.asc(), Note.id.asc())
    else:
        stmt = stmt.order_by(column.desc(), Note.id.desc())

    return stmt.limit(options.limit).offset(options.offset)


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Unlike the generic base operations, every method here takes the
    owner's id and never addresses a note by id alone.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, user_id: int, note_id: int) -> Note | None:
        """
        Get a note by ID when it belongs to user_id.

        Returns None both when the note does not exist and when another
        user owns it.
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.id == note_id, owner_predicate(user_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_owned(
        self,
        user_id: int,
        title: str,
        content: str = "",
        tags: list[str] | None = None,
        is_archived: bool = False,
    ) -> Note:
        """Insert a note; created_at and updated_at share one instant."""
        now = utc_now()
        return await self.create(
            user_id=user_id,
            title=title,
            content=content,
            tags=list(tags or []),
            is_archived=is_archived,
            created_at=now,
            updated_at=now,
        )

    async def update_owned(self, user_id: int, note_id: int, **fields: Any) -> bool:
        """
        Write the given columns on an owned note and touch updated_at.

        Returns:
            True if a row was updated
        """
        result = await self.session.execute(
            update(Note)
            .where(Note.id == note_id, owner_predicate(user_id))
            .values(**fields, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete_owned(self, user_id: int, note_id: int) -> bool:
        """
        Hard-delete an owned note.

        Returns:
            True if a row was removed, False if nothing matched
        """
        result = await self.session.execute(
            delete(Note)
            .where(Note.id == note_id, owner_predicate(user_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def list_notes(self, user_id: int, options: NoteListOptions) -> list[Note]:
        """
        List a user's notes with filters, ordering and pagination.

        Args:
            user_id: Owner whose notes are listed
            options: Normalized listing options

        Returns:
            Ordered notes, possibly empty
        """
        stmt = build_list_query(user_id, options, self.dialect_name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
