"""AI hardware suggestion endpoint.

Proxies the conversation to the AI gateway and relays its server-sent event
stream to the browser unchanged.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import BaseModel, Field

from cirkit.api.middleware.auth import CurrentUser
from cirkit.api.ratelimit import RATE_LIMIT_AI, limiter
from cirkit.infrastructure.ai.factory import get_gateway_client
from cirkit.infrastructure.ai.gateway import GENERIC_DETAIL, AIGatewayClient
from cirkit.observability.metrics import AI_SUGGEST_REQUESTS
from cirkit.shared.exceptions import AIQuotaError, AIRateLimitError, AIServiceError
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["AI Suggest"])


class SuggestMessage(BaseModel):
    """One turn of the conversation."""

    role: Literal["user", "assistant", "system"]
    content: str = Field(..., min_length=1, max_length=10000)


class SuggestRequest(BaseModel):
    """Conversation so far, oldest first."""

    messages: list[SuggestMessage] = Field(..., min_length=1, max_length=50)


def get_gateway(request: Request) -> AIGatewayClient:
    """Shared gateway client (per FastAPI app)."""
    gateway = getattr(request.app.state, "ai_gateway", None)
    if gateway is None:
        gateway = get_gateway_client()
        request.app.state.ai_gateway = gateway
    return gateway


@router.post("/ai-suggest", response_model=None)
@limiter.limit(RATE_LIMIT_AI)
async def ai_suggest(
    request: Request,
    body: SuggestRequest,
    user: CurrentUser,
    gateway: Annotated[AIGatewayClient, Depends(get_gateway)],
) -> Response:
    """Stream hardware suggestions for the conversation."""
    logger.info("ai_suggest_requested", user_id=user.id, messages=len(body.messages))

    try:
        stream = await gateway.open_stream([m.model_dump() for m in body.messages])
    except AIRateLimitError as e:
        AI_SUGGEST_REQUESTS.labels(outcome="rate_limited").inc()
        return JSONResponse(status_code=429, content={"error": e.message})
    except AIQuotaError as e:
        AI_SUGGEST_REQUESTS.labels(outcome="quota_exhausted").inc()
        return JSONResponse(status_code=402, content={"error": e.message})
    except AIServiceError:
        AI_SUGGEST_REQUESTS.labels(outcome="error").inc()
        return JSONResponse(status_code=500, content={"error": GENERIC_DETAIL})

    AI_SUGGEST_REQUESTS.labels(outcome="streamed").inc()
    return StreamingResponse(
        stream.aiter_bytes(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
