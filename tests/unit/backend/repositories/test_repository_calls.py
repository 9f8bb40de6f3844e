"""
Unit Tests for Repository Calls.

Checks what the repositories hand to a mocked session and how they
interpret its results.
"""

import pytest

from notes_app.backend.repositories.note import NoteListOptions, NoteRepository
from notes_app.backend.repositories.user import UserRepository


def _sql(mock_db_session) -> str:
    stmt = mock_db_session.execute.call_args.args[0]
    return " ".join(str(stmt).split())


class TestNoteRepository:
    @pytest.mark.asyncio
    async def test_get_owned_scopes_by_owner(self, mock_db_session, mock_db_result, make_note):
        note = make_note(id=3)
        mock_db_result.scalar_one_or_none.return_value = note
        mock_db_session.execute.return_value = mock_db_result

        result = await NoteRepository(mock_db_session).get_owned(7, 3)

        assert result is note
        sql = _sql(mock_db_session)
        assert "notes.id =" in sql
        assert "notes.user_id =" in sql

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rowcount,expected", [(1, True), (0, False)])
    async def test_update_owned_reports_rowcount(
        self, mock_db_session, mock_db_result, rowcount, expected
    ):
        mock_db_result.rowcount = rowcount
        mock_db_session.execute.return_value = mock_db_result

        assert await NoteRepository(mock_db_session).update_owned(7, 3, title="New") is expected

        sql = _sql(mock_db_session)
        assert sql.startswith("UPDATE notes SET")
        assert "updated_at" in sql
        assert "notes.user_id =" in sql

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rowcount,expected", [(1, True), (0, False)])
    async def test_delete_owned_reports_rowcount(
        self, mock_db_session, mock_db_result, rowcount, expected
    ):
        mock_db_result.rowcount = rowcount
        mock_db_session.execute.return_value = mock_db_result

        assert await NoteRepository(mock_db_session).delete_owned(7, 3) is expected
        assert _sql(mock_db_session).startswith("DELETE FROM notes")

    @pytest.mark.asyncio
    async def test_list_notes_uses_session_dialect(self, mock_db_session, mock_db_result, make_note):
        notes = [make_note(id=1), make_note(id=2)]
        mock_db_result.scalars.return_value.all.return_value = notes
        mock_db_session.execute.return_value = mock_db_result

        result = await NoteRepository(mock_db_session).list_notes(7, NoteListOptions(tag="work"))

        assert result == notes
        assert "json_each" in _sql(mock_db_session)

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_db_session, mock_db_result):
        mock_db_session.execute.return_value = mock_db_result

        assert await NoteRepository(mock_db_session).list_notes(7, NoteListOptions()) == []


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_exists_by_email(self, mock_db_session, mock_db_result, make_user):
        mock_db_result.scalar_one_or_none.return_value = make_user()
        mock_db_session.execute.return_value = mock_db_result

        assert await UserRepository(mock_db_session).exists_by_email("alice@example.com") is True

    @pytest.mark.asyncio
    async def test_create_adds_flushes_and_refreshes(self, mock_db_session):
        user = await UserRepository(mock_db_session).create(
            email="alice@example.com", password_hash="h"
        )

        mock_db_session.add.assert_called_once_with(user)
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.refresh.assert_awaited_once_with(user)
