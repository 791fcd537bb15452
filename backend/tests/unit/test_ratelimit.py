"""Unit tests for API rate limiting.

Tests rate limit configuration, key generation and the 429 handler.
"""

import json
from unittest.mock import MagicMock, patch

from slowapi.errors import RateLimitExceeded


class TestRateLimitConfiguration:
    """Test rate limit configuration values."""

    def test_rate_limit_constants_defined(self):
        from cirkit.api.ratelimit import RATE_LIMIT_AI, RATE_LIMIT_DEFAULT, RATE_LIMIT_HEALTH

        assert RATE_LIMIT_DEFAULT == "100/minute"
        assert RATE_LIMIT_AI == "20/minute"
        assert RATE_LIMIT_HEALTH == "60/minute"

    def test_development_uses_memory_storage(self, monkeypatch):
        from cirkit.api.ratelimit import _storage_uri

        monkeypatch.setenv("APP_ENV", "development")

        assert _storage_uri() == "memory://"

    def test_production_uses_redis(self, monkeypatch):
        from cirkit.api.ratelimit import _storage_uri

        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("AUTH_PROVIDER", "supabase")
        monkeypatch.setenv("SUPABASE_JWT_SECRET", "0" * 32)
        monkeypatch.setenv("CORS_ORIGINS", "https://cirkit.example.com")
        monkeypatch.setenv("REDIS_URL", "redis://redis:6379/2")

        assert _storage_uri() == "redis://redis:6379/2"

    def test_invalid_settings_fall_back_to_memory(self, monkeypatch):
        from cirkit.api.ratelimit import _storage_uri

        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("AUTH_PROVIDER", "dev")

        assert _storage_uri() == "memory://"


class TestRateLimitKeyGeneration:
    """Test rate limit key generation."""

    def test_get_rate_limit_key_with_user(self):
        from cirkit.api.ratelimit import _get_rate_limit_key

        mock_request = MagicMock()
        mock_request.state.user = MagicMock(id="user-123")
        mock_request.client.host = "192.168.1.1"

        assert _get_rate_limit_key(mock_request) == "user:user-123"

    def test_get_rate_limit_key_without_user(self):
        from cirkit.api.ratelimit import _get_rate_limit_key

        mock_request = MagicMock()
        mock_request.state = MagicMock(spec=[])  # No user attribute
        mock_request.client.host = "192.168.1.1"

        assert _get_rate_limit_key(mock_request) == "192.168.1.1"

    def test_get_rate_limit_key_user_is_none(self):
        from cirkit.api.ratelimit import _get_rate_limit_key

        mock_request = MagicMock()
        mock_request.state.user = None
        mock_request.client.host = "10.0.0.1"

        assert _get_rate_limit_key(mock_request) == "10.0.0.1"


class TestRateLimitExceededHandler:
    """Test custom rate limit exceeded handler."""

    def _exceeded(self, limit_str: str) -> RateLimitExceeded:
        mock_limit = MagicMock()
        mock_limit.error_message = None
        mock_limit.limit = limit_str
        return RateLimitExceeded(mock_limit)

    def _request(self) -> MagicMock:
        mock_request = MagicMock()
        mock_request.url.path = "/api/v1/ai-suggest"
        mock_request.method = "POST"
        mock_request.state.user = MagicMock(id="user-123")
        return mock_request

    def test_handler_returns_429_json(self):
        from cirkit.api.ratelimit import rate_limit_exceeded_handler

        with patch("cirkit.api.ratelimit.logger"):
            response = rate_limit_exceeded_handler(self._request(), self._exceeded("20 per 1 minute"))

        body = json.loads(response.body)
        assert response.status_code == 429
        assert body["error"].startswith("Too many requests")
        assert response.headers["X-RateLimit-Limit"] == "20"

    def test_handler_includes_retry_after_header(self):
        from cirkit.api.ratelimit import rate_limit_exceeded_handler

        exc = self._exceeded("20 per 1 minute")
        exc.retry_after = 30

        with patch("cirkit.api.ratelimit.logger"):
            response = rate_limit_exceeded_handler(self._request(), exc)

        assert response.headers["Retry-After"] == "30"
