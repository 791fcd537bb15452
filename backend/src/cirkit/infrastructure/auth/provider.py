"""Abstract authentication provider interface.

The API only needs to turn a bearer token into a user; the provider behind it
(Supabase in production, a fixed dev user locally) is chosen by settings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    """Authenticated user data from auth provider."""

    id: str  # Supabase user UUID
    email: str
    role: str = "user"  # app role: admin, moderator or user
    email_verified: bool = False
    full_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class AuthProvider(ABC):
    """Abstract authentication provider.

    Implementations:
    - SupabaseAuthProvider: Supabase Auth JWTs
    - DevAuthProvider: Local development without Supabase
    """

    @abstractmethod
    async def verify_token(self, token: str) -> AuthUser:
        """Verify a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Authorization header

        Returns:
            AuthUser with user details

        Raises:
            TokenExpiredError: If the token has expired
            TokenInvalidError: If the token is invalid
            AuthenticationError: For other auth failures
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> AuthUser | None:
        """Get user by ID, or None if unknown."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None
