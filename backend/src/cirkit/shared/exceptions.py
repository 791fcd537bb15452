"""Custom exception hierarchy for Cirkit."""

from typing import Any


class CirkitError(Exception):
    """Base exception for all Cirkit errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ----- Authentication Errors -----


class AuthenticationError(CirkitError):
    """Authentication failed."""

    pass


class TokenExpiredError(AuthenticationError):
    """JWT token has expired."""

    pass


class TokenInvalidError(AuthenticationError):
    """JWT token is invalid."""

    pass


# ----- Validation Errors -----


class ValidationError(CirkitError):
    """Input validation failed."""

    pass


class EmptyMessageError(ValidationError):
    """Chat input is empty after trimming."""

    def __init__(self) -> None:
        super().__init__(message="Message must not be empty")


# ----- Chat Errors -----


class ChatError(CirkitError):
    """Conversation state does not allow the requested operation."""

    pass


class TurnInProgressError(ChatError):
    """A turn is already streaming; a new one cannot start yet."""

    def __init__(self) -> None:
        super().__init__(message="A response is still streaming")


class MessageFinalizedError(ChatError):
    """Attempt to change a message after its stream finished."""

    def __init__(self) -> None:
        super().__init__(message="Message is finalized and can no longer change")


# ----- External Service Errors -----


class ExternalServiceError(CirkitError):
    """Error from an external service."""

    pass


class AIServiceError(ExternalServiceError):
    """Error from the chat endpoint or AI gateway (network or non-2xx status)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class AIRateLimitError(AIServiceError):
    """AI service rate limit exceeded (HTTP 429)."""

    pass


class AIQuotaError(AIServiceError):
    """AI credits exhausted (HTTP 402)."""

    pass


class ChatAuthError(AIServiceError, AuthenticationError):
    """Chat request rejected for missing or invalid credentials (HTTP 401)."""

    pass


class CartSyncError(ExternalServiceError):
    """Server-side cart could not be loaded or saved."""

    pass
