"""
Pytest configuration and fixtures for Cirkit backend tests.
"""
import json
import os
from collections.abc import AsyncIterator, Iterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import pytest

os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("AUTH_PROVIDER", "dev")
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-gateway-key")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")

from cirkit.config import Settings, get_settings  # noqa: E402


def sse_delta(text: str) -> str:
    """One SSE line carrying a content delta."""
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]}) + "\n"


SSE_DONE = "data: [DONE]\n"


async def byte_chunks(*chunks: bytes | str) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


class FakeTransport:
    """Chat transport returning scripted bodies, or raising before the body.

    ``scripts`` is consumed one entry per turn: either a list of chunks or an
    exception instance.
    """

    def __init__(self, *scripts: Sequence[bytes | str] | BaseException) -> None:
        self.scripts = list(scripts)
        self.requests: list[list[dict[str, str]]] = []
        self.closed = 0

    @asynccontextmanager
    async def stream(self, messages: Sequence[dict[str, str]]) -> AsyncIterator[Any]:
        self.requests.append([dict(m) for m in messages])
        script = self.scripts.pop(0)
        if isinstance(script, BaseException):
            raise script
        try:
            yield byte_chunks(*script)
        finally:
            self.closed += 1


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the process environment."""
    return Settings(
        _env_file=None,
        app_env="development",
        auth_provider="dev",
        supabase_url="https://test.supabase.co",
        supabase_anon_key="test-anon-key",
        supabase_jwt_secret="test-jwt-secret-at-least-32-chars-long",
        ai_gateway_api_key="test-gateway-key",
    )


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage() -> dict[str, str]:
    """In-memory local storage."""
    return {}
