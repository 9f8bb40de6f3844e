"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.backend.core.database import get_db_session
from notes_app.backend.core.exceptions import AuthenticationError, ValidationError
from notes_app.backend.core.logging import get_logger
from notes_app.backend.core.security import TokenManager
from notes_app.backend.core.utils import parse_positive_int

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from /auth/login")


def get_token_manager(request: Request) -> TokenManager:
    """The process-wide token manager built by the app factory."""
    return request.app.state.token_manager


Tokens = Annotated[TokenManager, Depends(get_token_manager)]


async def get_current_user_id(
    tokens: Tokens,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    """
    Resolve the acting user from the bearer token.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    return tokens.resolve_user_id(credentials.credentials)


CurrentUserId = Annotated[int, Depends(get_current_user_id)]


async def get_note_id(note_id: str = Path(description="Note identifier")) -> int:
    """
    Parse the note id path segment.

    Raises:
        ValidationError: If it is not a positive integer
    """
    parsed = parse_positive_int(note_id)
    if parsed is None:
        raise ValidationError("Invalid note id", details={"note_id": note_id})
    return parsed


NoteId = Annotated[int, Depends(get_note_id)]
