"""
Auth API Endpoints.

Registration, login and the caller's profile.
"""

from fastapi import APIRouter, Request

from notes_app.backend.core.dependencies import CurrentUserId, DbSession, Tokens
from notes_app.backend.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserResponse,
)
from notes_app.backend.services.auth import AuthService

router = APIRouter()


def _service(request: Request, db: DbSession, tokens: Tokens) -> AuthService:
    return AuthService(db, tokens, request.app.state.config.security.passwords)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    summary="Register",
    description="Create an account and receive an access token.",
)
async def register(
    data: RegisterRequest,
    request: Request,
    db: DbSession,
    tokens: Tokens,
) -> AuthResponse:
    user, token = await _service(request, db, tokens).register(data.email, data.password)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="Exchange email and password for an access token.",
)
async def login(
    data: LoginRequest,
    request: Request,
    db: DbSession,
    tokens: Tokens,
) -> AuthResponse:
    user, token = await _service(request, db, tokens).login(data.email, data.password)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Current user",
)
async def profile(
    request: Request,
    db: DbSession,
    tokens: Tokens,
    user_id: CurrentUserId,
) -> ProfileResponse:
    user = await _service(request, db, tokens).get_profile(user_id)
    return ProfileResponse(user=UserResponse.model_validate(user))
