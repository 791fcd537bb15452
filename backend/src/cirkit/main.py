"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from cirkit import __version__
from cirkit.api.ratelimit import limiter, rate_limit_exceeded_handler
from cirkit.api.router import api_router
from cirkit.config import get_settings
from cirkit.infrastructure.ai.factory import close_gateway_client
from cirkit.observability.metrics import setup_metrics
from cirkit.shared.exceptions import (
    AIQuotaError,
    AIRateLimitError,
    AuthenticationError,
    ChatError,
    CirkitError,
    ExternalServiceError,
    ValidationError,
)
from cirkit.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events."""
    setup_logging()
    logger.info("cirkit_starting", version=__version__)

    settings = get_settings()
    if getattr(app.state, "auth_provider", None) is None:
        from cirkit.api.middleware.auth import build_auth_provider

        app.state.auth_provider = build_auth_provider(settings)

    yield

    logger.info("cirkit_stopping")

    auth_provider = getattr(app.state, "auth_provider", None)
    if auth_provider is not None:
        await auth_provider.close()

    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()

    gateway = getattr(app.state, "ai_gateway", None)
    if gateway is not None:
        await gateway.close()
    await close_gateway_client()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Cirkit API",
        description="AI hardware advisor, cart sync and PC build configurator",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "apikey", "X-Client-Info"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    setup_metrics(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": {"errors": exc.errors()},
            },
        )

    @app.exception_handler(AuthenticationError)
    async def auth_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=401,
            content={"error": "authentication_error", "message": exc.message},
        )

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=409,
            content={"error": "conflict", "message": exc.message},
        )

    @app.exception_handler(AIRateLimitError)
    async def ai_rate_limit_handler(request: Request, exc: AIRateLimitError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=429,
            content={"error": "rate_limited", "message": exc.message},
        )

    @app.exception_handler(AIQuotaError)
    async def ai_quota_handler(request: Request, exc: AIQuotaError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=402,
            content={"error": "quota_exhausted", "message": exc.message},
        )

    @app.exception_handler(ExternalServiceError)
    async def external_error_handler(
        request: Request, exc: ExternalServiceError
    ) -> JSONResponse:
        _ = request
        logger.error("external_service_error", error=exc.message, details=exc.details)
        return JSONResponse(
            status_code=502,
            content={"error": "external_service_error", "message": exc.message},
        )

    @app.exception_handler(CirkitError)
    async def cirkit_error_handler(request: Request, exc: CirkitError) -> JSONResponse:
        _ = request
        logger.error("unhandled_error", error=exc.message, details=exc.details)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": "An internal error occurred"},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        _ = request
        logger.exception("unexpected_error", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": "An unexpected error occurred"},
        )


app = create_app()
