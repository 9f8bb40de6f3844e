"""
Note Service.

Business logic layer for notes. Every operation is scoped to the acting
user: a note owned by someone else behaves exactly like a note that does
not exist.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.backend.models.note import Note
from notes_app.backend.repositories.note import NoteListOptions, NoteRepository
from notes_app.backend.schemas.note import NoteCreate, NoteUpdate
from notes_app.backend.services.base import BaseService

NOTE_NOT_FOUND = "Note not found"


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles ownership-scoped creation, retrieval, listing, partial
    updates and deletion.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def create_note(self, user_id: int, data: NoteCreate) -> Note:
        """
        Create a new note owned by user_id.

        Args:
            user_id: Owner of the new note
            data: Validated creation payload (defaults already applied)

        Returns:
            The stored note, read back through the normal read path
        """
        self._log_operation("Creating note", user_id=user_id, title=data.title)

        created = await self._execute_db_operation(
            "create_note",
            self.repo.create_owned(
                user_id=user_id,
                title=data.title,
                content=data.content,
                tags=data.tags,
                is_archived=data.is_archived,
            ),
        )

        self._log_debug("Note created", note_id=created.id)
        return await self.get_note(user_id, created.id)

    async def get_note(self, user_id: int, note_id: int) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If the note does not exist or is not owned by user_id
        """
        note = await self._execute_db_operation(
            "get_note",
            self.repo.get_owned(user_id, note_id),
        )
        return self._require_found(note, NOTE_NOT_FOUND)

    async def list_notes(self, user_id: int, options: NoteListOptions) -> list[Note]:
        """
        List a user's notes.

        Args:
            user_id: Owner whose notes are listed
            options: Search, tag, archive filter, ordering and window

        Returns:
            Ordered list of notes, possibly empty
        """
        self._log_debug(
            "Listing notes",
            user_id=user_id,
            search=options.search,
            tag=options.tag,
            archived=options.archived,
            limit=options.limit,
            offset=options.offset,
        )
        return await self._execute_db_operation(
            "list_notes",
            self.repo.list_notes(user_id, options),
        )

    async def update_note(self, user_id: int, note_id: int, data: NoteUpdate) -> Note:
        """
        Apply a partial update to an owned note.

        Only fields present in the payload are written. A payload with no
        fields returns the note as it is, without touching updated_at.

        Raises:
            NotFoundError: If the note does not exist or is not owned by user_id
        """
        existing = await self.get_note(user_id, note_id)

        fields = data.model_dump(exclude_unset=True)
        if not fields:
            self._log_debug("Empty update, returning current note", note_id=note_id)
            return existing

        self._log_operation(
            "Updating note",
            user_id=user_id,
            note_id=note_id,
            fields=sorted(fields),
        )
        await self._execute_db_operation(
            "update_note",
            self.repo.update_owned(user_id, note_id, **fields),
        )
        return await self.get_note(user_id, note_id)

    async def delete_note(self, user_id: int, note_id: int) -> bool:
        """
        Permanently delete an owned note.

        Returns:
            True if a note was removed, False if there was nothing to remove
        """
        deleted = await self._execute_db_operation(
            "delete_note",
            self.repo.delete_owned(user_id, note_id),
        )
        self._log_operation(
            "Note deleted" if deleted else "Note delete matched nothing",
            user_id=user_id,
            note_id=note_id,
        )
        return deleted
