"""Client-side sign-in helpers."""

from cirkit.domain.auth.rate_limit import (
    LoginRateLimiter,
    RateLimitConfig,
    RateLimitStatus,
)

__all__ = ["LoginRateLimiter", "RateLimitConfig", "RateLimitStatus"]
