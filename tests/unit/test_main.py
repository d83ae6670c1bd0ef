"""Unit tests for FastAPI application.

Tests for lateedition/main.py - root, health and error format.

Run with:
    pytest tests/unit/test_main.py -v
"""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.mark.fast
class TestRootEndpoint:
    """Tests for root endpoint."""

    @pytest.mark.asyncio
    async def test_root_returns_info(self, client):
        response = await client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Late Edition"
        assert "version" in data
        assert data["health"] == "/health"


@pytest.mark.fast
class TestHealthEndpoint:
    """Tests for health endpoint."""

    @pytest.mark.asyncio
    async def test_healthy(self, client):
        with patch("lateedition.main.check_db_connection", AsyncMock(return_value=True)):
            response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] is True
        assert data["storage"] is True

    @pytest.mark.asyncio
    async def test_degraded_when_database_down(self, client):
        with patch("lateedition.main.check_db_connection", AsyncMock(return_value=False)):
            response = await client.get("/health")
        data = response.json()
        assert data["status"] == "degraded"
        assert data["database"] is False


@pytest.mark.fast
class TestErrorFormat:
    """HTTP errors share one body shape."""

    @pytest.mark.asyncio
    async def test_not_found_shape(self, client):
        response = await client.get("/api/v1/posts/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Post not found", "detail": None}
