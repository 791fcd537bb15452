"""AI infrastructure: gateway (server side) and chat stream client (client side)."""

from cirkit.infrastructure.ai.chat_client import ChatStreamClient, error_for_status
from cirkit.infrastructure.ai.gateway import AIGatewayClient, GatewayStream

__all__ = ["AIGatewayClient", "ChatStreamClient", "GatewayStream", "error_for_status"]
