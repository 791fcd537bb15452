"""AI client factories."""

from functools import lru_cache

from cirkit.config import get_settings
from cirkit.infrastructure.ai.chat_client import ChatStreamClient, CredentialSource
from cirkit.infrastructure.ai.gateway import AIGatewayClient
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_gateway_client() -> AIGatewayClient:
    """Get the shared gateway client.

    Raises:
        ValueError: AI_GATEWAY_API_KEY is not configured
    """
    settings = get_settings()
    if not settings.ai_gateway_api_key:
        raise ValueError("AI_GATEWAY_API_KEY is not configured")
    logger.info("using_ai_gateway", url=settings.ai_gateway_url, model=settings.ai_model)
    return AIGatewayClient()


async def close_gateway_client() -> None:
    """Close and clear the shared gateway client (used at app shutdown)."""
    if get_gateway_client.cache_info().currsize:
        await get_gateway_client().close()
    get_gateway_client.cache_clear()


def build_chat_stream_client(credentials: CredentialSource) -> ChatStreamClient:
    """Chat client pointed at the configured AI suggest endpoint."""
    settings = get_settings()
    return ChatStreamClient(
        chat_url=settings.resolved_chat_url,
        credentials=credentials,
        timeout=settings.ai_request_timeout,
    )
