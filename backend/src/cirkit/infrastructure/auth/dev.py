"""Development authentication provider for local testing.

Accepts any bearer token. NEVER use in production!
"""

from cirkit.infrastructure.auth.provider import AuthProvider, AuthUser
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

DEV_USER_ID = "00000000-0000-0000-0000-000000000001"

DEV_USER = AuthUser(
    id=DEV_USER_ID,
    email="dev@cirkit.local",
    role="admin",
    email_verified=True,
    full_name="Dev User",
)


class DevAuthProvider(AuthProvider):
    """Development auth provider that accepts any token."""

    async def verify_token(self, token: str) -> AuthUser:
        logger.warning(
            "dev_auth_used",
            message="Using development auth - DO NOT USE IN PRODUCTION",
        )
        return DEV_USER

    async def get_user(self, user_id: str) -> AuthUser | None:
        return DEV_USER
