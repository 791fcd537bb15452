"""Authentication providers."""

from cirkit.infrastructure.auth.provider import AuthProvider, AuthUser

__all__ = ["AuthProvider", "AuthUser"]
