"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from notes_app.backend.models.note import Note
from notes_app.backend.models.user import User


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = NoteRepository(mock_db_session)
            # Test repository methods
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.get_bind = MagicMock()
    session.get_bind.return_value.dialect.name = "sqlite"
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = make_note()
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    result.rowcount = 0
    return result


# =============================================================================
# Model Factories
# =============================================================================


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Build detached Note instances with sensible defaults."""

    def _make(**overrides: Any) -> Note:
        stamp = datetime(2024, 1, 1, 12, 0, 0)
        values: dict[str, Any] = {
            "id": 1,
            "user_id": 7,
            "title": "Test Note",
            "content": "Test content",
            "tags": [],
            "is_archived": False,
            "created_at": stamp,
            "updated_at": stamp,
        }
        values.update(overrides)
        return Note(**values)

    return _make


@pytest.fixture
def make_user() -> Callable[..., User]:
    """Build detached User instances with sensible defaults."""

    def _make(**overrides: Any) -> User:
        stamp = datetime(2024, 1, 1, 12, 0, 0)
        values: dict[str, Any] = {
            "id": 7,
            "email": "alice@example.com",
            "password_hash": "not-a-real-hash",
            "created_at": stamp,
            "updated_at": stamp,
        }
        values.update(overrides)
        return User(**values)

    return _make


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
