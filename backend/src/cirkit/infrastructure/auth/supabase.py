"""Supabase authentication provider implementation."""

import httpx
from jose import JWTError, jwt

from cirkit.config import get_settings
from cirkit.infrastructure.auth.provider import AuthProvider, AuthUser
from cirkit.shared.exceptions import TokenExpiredError, TokenInvalidError
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)


class SupabaseAuthProvider(AuthProvider):
    """Supabase Auth implementation.

    Access tokens are verified locally with the project's JWT secret; the
    Admin API is only used for user lookups.
    """

    def __init__(self) -> None:
        settings = get_settings()
        self.supabase_url = settings.supabase_url
        self.jwt_secret = settings.supabase_jwt_secret
        self.service_role_key = settings.supabase_service_role_key
        self._client: httpx.AsyncClient | None = None

    @property
    def admin_client(self) -> httpx.AsyncClient:
        """Get or create admin HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.supabase_url}/auth/v1",
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {self.service_role_key}",
                },
                timeout=30.0,
            )
        return self._client

    async def verify_token(self, token: str) -> AuthUser:
        """Verify Supabase JWT and extract user info."""
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTError as e:
            logger.warning("jwt_decode_failed", error=str(e))
            raise TokenInvalidError("Token is invalid")

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            raise TokenInvalidError("Token carries no user id or email")

        user_metadata = payload.get("user_metadata") or {}
        app_metadata = payload.get("app_metadata") or {}

        return AuthUser(
            id=user_id,
            email=email,
            role=app_metadata.get("role", "user"),
            email_verified=bool(user_metadata.get("email_verified", False)),
            full_name=user_metadata.get("full_name") or user_metadata.get("display_name"),
        )

    async def get_user(self, user_id: str) -> AuthUser | None:
        """Get user by ID from Supabase."""
        try:
            response = await self.admin_client.get(f"/admin/users/{user_id}")

            if response.status_code == 404:
                return None

            response.raise_for_status()
            data = response.json()

            user_metadata = data.get("user_metadata") or {}
            app_metadata = data.get("app_metadata") or {}
            return AuthUser(
                id=data["id"],
                email=data["email"],
                role=app_metadata.get("role", "user"),
                email_verified=data.get("email_confirmed_at") is not None,
                full_name=user_metadata.get("full_name"),
            )

        except httpx.HTTPError as e:
            logger.error("supabase_get_user_failed", user_id=user_id, error=str(e))
            return None

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
