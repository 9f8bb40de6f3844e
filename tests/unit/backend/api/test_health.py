"""
Unit Tests for Health Check Endpoints.

Tests the health check functionality including:
- Liveness check (/health)
- Readiness check (/health/ready)
- Database connectivity check
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from notes_app.backend.api.health import check_database, health_check, readiness_check


def _database(connect_error=None):
    """Mock Database whose engine.connect() succeeds or raises."""
    database = MagicMock()
    if connect_error is not None:
        database.engine.connect.side_effect = connect_error
        return database

    conn = AsyncMock()
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=conn)
    context.__aexit__ = AsyncMock(return_value=False)
    database.engine.connect.return_value = context
    return database


def _request(database):
    request = MagicMock()
    request.app.state.database = database
    return request


class TestHealthCheck:
    """Tests for the liveness health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy(self):
        assert await health_check() == {"status": "healthy"}


class TestCheckDatabase:
    """Tests for the database health check function."""

    @pytest.mark.asyncio
    async def test_healthy_database_reports_latency(self):
        result = await check_database(_database())

        assert result["status"] == "healthy"
        assert result["latency_ms"] >= 0

    @pytest.mark.asyncio
    async def test_connection_failure_is_unhealthy(self):
        result = await check_database(_database(ConnectionRefusedError("refused")))

        assert result == {"status": "unhealthy", "error": "ConnectionRefusedError"}


class TestReadinessCheck:
    """Tests for the readiness health check endpoint."""

    @pytest.mark.asyncio
    async def test_ready_when_database_answers(self):
        result = await readiness_check(_request(_database()))

        assert result["status"] == "healthy"
        assert result["checks"]["database"]["status"] == "healthy"
        assert "timestamp" in result

    @pytest.mark.asyncio
    async def test_returns_503_when_database_down(self):
        response = await readiness_check(_request(_database(OSError("down"))))

        assert response.status_code == 503
        body = json.loads(response.body)
        assert body["status"] == "unhealthy"
        assert body["checks"]["database"]["status"] == "unhealthy"
