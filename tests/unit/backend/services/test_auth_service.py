"""
Unit Tests for Auth Service.

Tests registration, login and profile lookup with a mocked repository.
Password hashing and token signing run for real.
"""

import pytest
from unittest.mock import AsyncMock, patch

from notes_app.backend.core.config_schema import JwtSchema, PasswordPolicySchema
from notes_app.backend.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from notes_app.backend.core.security import TokenManager, hash_password
from notes_app.backend.services.auth import AuthService


@pytest.fixture
def tokens():
    return TokenManager(
        "unit-test-secret-for-auth-service",
        JwtSchema(algorithm="HS256", access_token_expire_minutes=5, audience="notes-api"),
    )


@pytest.fixture
def service(tokens):
    return AuthService(
        AsyncMock(),
        tokens,
        PasswordPolicySchema(min_length=6, max_length=72),
    )


class TestRegister:
    """Tests for account registration."""

    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, service, tokens, make_user):
        user = make_user(id=3, email="alice@example.com")

        with patch.object(service.repo, "exists_by_email", return_value=False), \
             patch.object(service.repo, "create", return_value=user) as mock_create:
            result_user, token = await service.register("alice@example.com", "s3cret!")

        assert result_user is user
        assert tokens.resolve_user_id(token) == 3
        kwargs = mock_create.call_args.kwargs
        assert kwargs["email"] == "alice@example.com"
        assert kwargs["password_hash"] != "s3cret!"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, service):
        with patch.object(service.repo, "exists_by_email", return_value=True), \
             patch.object(service.repo, "create") as mock_create:
            with pytest.raises(ConflictError) as exc_info:
                await service.register("alice@example.com", "s3cret!")

        assert exc_info.value.message == "Email already registered"
        mock_create.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["12345", "x" * 73])
    async def test_password_length_policy(self, service, password):
        with patch.object(service.repo, "exists_by_email") as mock_exists:
            with pytest.raises(ValidationError) as exc_info:
                await service.register("alice@example.com", password)

        assert "password" in exc_info.value.details
        mock_exists.assert_not_called()


class TestLogin:
    """Tests for credential checks."""

    @pytest.mark.asyncio
    async def test_login_success(self, service, tokens, make_user):
        user = make_user(id=4, password_hash=hash_password("s3cret!"))

        with patch.object(service.repo, "get_by_email", return_value=user):
            result_user, token = await service.login("alice@example.com", "s3cret!")

        assert result_user is user
        assert tokens.decode_token(token)["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password(self, service, make_user):
        user = make_user(password_hash=hash_password("s3cret!"))

        with patch.object(service.repo, "get_by_email", return_value=user):
            with pytest.raises(AuthenticationError) as exc_info:
                await service.login("alice@example.com", "nope-nope")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email(self, service):
        with patch.object(service.repo, "get_by_email", return_value=None):
            with pytest.raises(AuthenticationError) as exc_info:
                await service.login("ghost@example.com", "s3cret!")

        assert exc_info.value.message == "Invalid credentials"


class TestProfile:
    """Tests for profile lookup."""

    @pytest.mark.asyncio
    async def test_profile_found(self, service, make_user):
        user = make_user(id=9)

        with patch.object(service.repo, "get_by_id_or_none", return_value=user):
            assert await service.get_profile(9) is user

    @pytest.mark.asyncio
    async def test_profile_missing(self, service):
        with patch.object(service.repo, "get_by_id_or_none", return_value=None):
            with pytest.raises(NotFoundError):
                await service.get_profile(9)
