"""Unit tests for health check and metrics endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient


def mock_request() -> MagicMock:
    request = MagicMock()
    request.app.state = MagicMock(spec=[])  # nothing cached yet
    return request


class TestHealthEndpoint:
    """Test basic health endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy(self):
        from cirkit import __version__
        from cirkit.api.routes.health import health_check

        response = await health_check()

        assert response.status == "healthy"
        assert response.version == __version__


class TestReadinessEndpoint:
    """Test readiness check endpoint."""

    @pytest.mark.asyncio
    async def test_ready_all_services_up(self):
        from cirkit.api.routes.health import readiness_check

        with patch("redis.asyncio.from_url") as mock_redis_from_url:
            mock_redis_from_url.return_value = AsyncMock()

            response = await readiness_check(mock_request())

        assert response.ready is True
        assert response.checks == {"redis": True, "ai_gateway": True}

    @pytest.mark.asyncio
    async def test_ready_redis_down(self):
        from cirkit.api.routes.health import readiness_check

        with patch("redis.asyncio.from_url") as mock_redis_from_url:
            mock_redis = AsyncMock()
            mock_redis.ping = AsyncMock(side_effect=Exception("Connection refused"))
            mock_redis_from_url.return_value = mock_redis

            response = await readiness_check(mock_request())

        assert response.ready is False
        assert response.checks["redis"] is False

    @pytest.mark.asyncio
    async def test_ready_without_gateway_key(self, monkeypatch):
        from cirkit.api.routes.health import readiness_check

        monkeypatch.setenv("AI_GATEWAY_API_KEY", "")

        with patch("redis.asyncio.from_url") as mock_redis_from_url:
            mock_redis_from_url.return_value = AsyncMock()

            response = await readiness_check(mock_request())

        assert response.ready is False
        assert response.checks["ai_gateway"] is False


class TestAppEndpoints:
    """Test the assembled application."""

    @pytest.fixture
    def client(self) -> TestClient:
        from cirkit.main import create_app

        return TestClient(create_app())

    def test_health_route(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_metrics_endpoint_returns_text(self, client):
        client.get("/api/v1/health")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'path="/api/v1/health"' in response.text
