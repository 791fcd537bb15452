"""HTTP client for the streaming AI suggest endpoint."""

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any

import httpx

from cirkit.shared.exceptions import (
    AIQuotaError,
    AIRateLimitError,
    AIServiceError,
    ChatAuthError,
)
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

CredentialSource = Callable[[], Awaitable[str | None]]


def error_for_status(status_code: int, message: str | None = None) -> AIServiceError:
    """Map a failed chat/gateway HTTP status to the error taxonomy."""
    details = {"status_code": status_code}
    if status_code == 401:
        return ChatAuthError(message or "Authentication required", details, status_code)
    if status_code == 402:
        return AIQuotaError(message or "AI credits exhausted", details, status_code)
    if status_code == 429:
        return AIRateLimitError(message or "Rate limit exceeded", details, status_code)
    return AIServiceError(message or "AI service error", details, status_code)


def _error_message(response: httpx.Response) -> str | None:
    try:
        body: Any = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class ChatStreamClient:
    """Opens authenticated SSE streams against the chat endpoint.

    ``credentials`` is awaited before every request and returns the bearer
    token of the signed-in user, or ``None`` when nobody is signed in.
    """

    def __init__(
        self,
        chat_url: str,
        credentials: CredentialSource,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.chat_url = chat_url
        self.credentials = credentials
        self._client = http_client
        self._owns_client = http_client is None
        self.timeout = timeout

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    @asynccontextmanager
    async def stream(
        self, messages: Sequence[dict[str, str]]
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open the response stream and yield its raw body chunks.

        Raises:
            ChatAuthError: No credential, or the endpoint answered 401
            AIQuotaError: 402
            AIRateLimitError: 429
            AIServiceError: Any other status or a network failure
        """
        token = await self.credentials()
        if not token:
            raise ChatAuthError("Authentication required")

        request = self.http_client.build_request(
            "POST",
            self.chat_url,
            json={"messages": list(messages)},
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "text/event-stream",
            },
        )

        try:
            response = await self.http_client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("chat_connection_error", error=str(e))
            raise AIServiceError("Connection to the chat service failed") from e

        try:
            if response.status_code >= 400:
                await response.aread()
                message = _error_message(response)
                logger.warning(
                    "chat_request_rejected",
                    status=response.status_code,
                    error=message,
                )
                raise error_for_status(response.status_code, message)

            yield self._body(response)
        finally:
            await response.aclose()

    @staticmethod
    async def _body(response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            logger.error("chat_stream_interrupted", error=str(e))
            raise AIServiceError("Chat stream was interrupted") from e

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
