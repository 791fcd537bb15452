"""Rate limiting configuration for API endpoints.

Uses slowapi with a Redis backend in production so limits hold across
workers; development and tests use in-memory storage.
"""

from fastapi import Request, Response
from pydantic import ValidationError as SettingsValidationError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from cirkit.config import get_settings
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

# Usage: @limiter.limit(RATE_LIMIT_AI)
RATE_LIMIT_DEFAULT = "100/minute"
RATE_LIMIT_AI = "20/minute"  # every call spends gateway credits
RATE_LIMIT_HEALTH = "60/minute"


def _get_rate_limit_key(request: Request) -> str:
    """Key by authenticated user when known, else by client IP."""
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.id}"
    return get_remote_address(request)


def _create_limiter(storage_uri: str = "memory://") -> Limiter:
    return Limiter(
        key_func=_get_rate_limit_key,
        storage_uri=storage_uri,
        strategy="fixed-window",
    )


def _storage_uri() -> str:
    try:
        settings = get_settings()
    except SettingsValidationError as e:
        logger.warning("rate_limiter_settings_invalid", error=str(e))
        return "memory://"
    if settings.is_production:
        logger.info("rate_limiter_backend", backend="redis")
        return str(settings.redis_url)
    logger.info("rate_limiter_backend", backend="memory")
    return "memory://"


limiter = _create_limiter(_storage_uri())


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Custom handler for rate limit exceeded errors."""
    retry_after = getattr(exc, "retry_after", 60)
    logger.warning(
        "rate_limit_exceeded",
        path=request.url.path,
        method=request.method,
        key=_get_rate_limit_key(request),
        limit=str(exc.detail),
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests. Please wait a moment.",
            "detail": str(exc.detail),
            "retry_after": retry_after,
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(exc.detail).split(" per ")[0],
        },
    )
