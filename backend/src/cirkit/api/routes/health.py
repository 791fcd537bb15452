"""Health check endpoints."""

from typing import Any, cast

from fastapi import APIRouter, Request
from pydantic import BaseModel

from cirkit.config import get_settings
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadyResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check - always returns OK if service is running."""
    from cirkit import __version__

    return HealthResponse(status="healthy", version=__version__)


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check(request: Request) -> ReadyResponse:
    """Readiness check - verifies dependencies are reachable."""
    settings = get_settings()
    checks: dict[str, bool] = {}

    # Redis backs the rate limiter in production
    try:
        import redis.asyncio as redis

        redis_client = getattr(request.app.state, "redis_client", None)
        if redis_client is None:
            redis_client = cast(Any, redis.from_url)(str(settings.redis_url))
            request.app.state.redis_client = redis_client
        await redis_client.ping()
        checks["redis"] = True
    except Exception as e:
        logger.warning("redis_health_check_failed", error=str(e))
        checks["redis"] = False

    checks["ai_gateway"] = bool(settings.ai_gateway_api_key)

    return ReadyResponse(ready=all(checks.values()), checks=checks)
