"""Hosted LLM gateway client (OpenAI-compatible chat completions)."""

import time
from collections.abc import AsyncIterator, Sequence

import httpx

from cirkit.config import get_settings
from cirkit.infrastructure.ai.chat_client import error_for_status
from cirkit.infrastructure.ai.prompts import RecommendationPromptV1
from cirkit.observability.metrics import AI_GATEWAY_STREAM_BYTES, AI_GATEWAY_STREAM_SECONDS
from cirkit.shared.exceptions import AIServiceError
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

RATE_LIMITED_DETAIL = "Rate limit exceeded. Please try again later."
QUOTA_EXHAUSTED_DETAIL = "AI credits exhausted. Please add credits to continue."
GENERIC_DETAIL = "AI service error"


class GatewayStream:
    """An open streaming completion; iterate the raw SSE body, then close."""

    def __init__(self, response: httpx.Response, started_at: float) -> None:
        self.response = response
        self.started_at = started_at

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Relay upstream bytes unchanged, releasing the response at the end."""
        total = 0
        try:
            async for chunk in self.response.aiter_bytes():
                total += len(chunk)
                yield chunk
        finally:
            await self.response.aclose()
            duration = time.monotonic() - self.started_at
            AI_GATEWAY_STREAM_SECONDS.observe(duration)
            AI_GATEWAY_STREAM_BYTES.inc(total)
            logger.info(
                "ai_gateway_stream_closed",
                bytes=total,
                duration_ms=round(duration * 1000, 2),
            )

    async def aclose(self) -> None:
        await self.response.aclose()


class AIGatewayClient:
    """Streams chat completions from the AI gateway.

    Features:
    - System prompt injection (versioned prompt)
    - Status mapping to AIRateLimitError / AIQuotaError / AIServiceError
    - Structured logging of failures and stream sizes
    """

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        model: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        self.url = url or settings.ai_gateway_url
        self.model = model or settings.ai_model
        self.prompt = RecommendationPromptV1()
        self.client = http_client or httpx.AsyncClient(timeout=settings.ai_request_timeout)

    def build_payload(self, messages: Sequence[dict[str, str]]) -> dict[str, object]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.prompt.render_system()},
                *messages,
            ],
            "stream": True,
        }

    async def open_stream(self, messages: Sequence[dict[str, str]]) -> GatewayStream:
        """Start a streaming completion.

        Raises:
            AIRateLimitError: Gateway answered 429
            AIQuotaError: Gateway answered 402
            AIServiceError: Any other failure
        """
        started_at = time.monotonic()
        request = self.client.build_request(
            "POST",
            self.url,
            json=self.build_payload(messages),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("ai_gateway_connection_error", error=str(e))
            raise AIServiceError(GENERIC_DETAIL) from e

        if response.status_code >= 400:
            body = await response.aread()
            await response.aclose()
            logger.error(
                "ai_gateway_error",
                status=response.status_code,
                body=body.decode("utf-8", errors="replace")[:500],
            )
            if response.status_code == 429:
                raise error_for_status(429, RATE_LIMITED_DETAIL)
            if response.status_code == 402:
                raise error_for_status(402, QUOTA_EXHAUSTED_DETAIL)
            raise AIServiceError(GENERIC_DETAIL, {"upstream_status": response.status_code}, 500)

        logger.info("ai_gateway_stream_opened", model=self.model, messages=len(messages))
        return GatewayStream(response, started_at)

    async def close(self) -> None:
        await self.client.aclose()
