"""
Integration Test Fixtures.

Fixtures for integration tests - the real app factory over a real
database. These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from notes_app.backend.core.config import AppConfig, Settings
from notes_app.backend.core.database import Database
from notes_app.backend.main import create_app

DEFAULT_PASSWORD = "s3cret-pass"


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(app_config: AppConfig, settings: Settings, database: Database) -> FastAPI:
    """Application built by the production factory around the test database."""
    return create_app(app_config=app_config, settings=settings, database=database)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client for the app.

    ASGITransport does not run the lifespan; the schema is already in
    place through the db_engine fixture.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_ok(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response succeeded and return its JSON body.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        return response.json()

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error envelope.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
            expected_code: Expected error code (optional)

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("data") is None, f"Error must carry no data: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a request validation error (400).

        Args:
            response: httpx Response object
            field: Expected field with validation error (optional)
        """
        data = ApiAssertions.assert_error(response, 400, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


RegisterUser = Callable[..., Awaitable[dict[str, Any]]]


@pytest.fixture
def register_user(client: AsyncClient) -> RegisterUser:
    """
    Register an account through the API.

    Returns the {user, token} body of the registration response.
    """

    async def _register(email: str, password: str = DEFAULT_PASSWORD) -> dict[str, Any]:
        response = await client.post(
            "/api/auth/register",
            json={"email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def auth_headers(register_user: RegisterUser) -> dict[str, str]:
    """
    Authorization headers for a freshly registered user.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/notes", headers=auth_headers)
            assert response.status_code == 200
    """
    body = await register_user("alice@example.com")
    return bearer(body["token"])


@pytest.fixture
async def other_auth_headers(register_user: RegisterUser) -> dict[str, str]:
    """Authorization headers for a second, unrelated user."""
    body = await register_user("bob@example.com")
    return bearer(body["token"])
