"""Prometheus metrics for the Cirkit API.

HTTP middleware metrics see a streamed response only up to its first byte,
so AI suggestion streams are also measured end to end by the gateway client.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.responses import Response

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)
REQUEST_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "In-progress HTTP requests",
    ["method"],
)
AI_SUGGEST_REQUESTS = Counter(
    "ai_suggest_requests_total",
    "AI suggestion requests by outcome",
    ["outcome"],  # streamed, rate_limited, quota_exhausted, error
)
AI_GATEWAY_STREAM_SECONDS = Histogram(
    "ai_gateway_stream_duration_seconds",
    "Time from gateway request to end of the relayed stream",
    buckets=(0.5, 1, 2.5, 5, 10, 20, 30, 60, 120),
)
AI_GATEWAY_STREAM_BYTES = Counter(
    "ai_gateway_stream_bytes_total",
    "Bytes relayed from the AI gateway",
)


def _get_route_path(request: Request) -> str:
    route: Any | None = request.scope.get("route")
    path = getattr(route, "path", None) if route is not None else None
    if isinstance(path, str) and path:
        return path
    return "unknown"


def setup_metrics(app: FastAPI) -> None:
    """Attach Prometheus metrics and /metrics endpoint to the app."""

    @app.middleware("http")
    async def metrics_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        method = request.method
        REQUEST_IN_PROGRESS.labels(method=method).inc()
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            # For streamed responses this measures time to first byte
            duration = time.perf_counter() - start
            path = _get_route_path(request)
            status_code = str(response.status_code) if response else "500"
            REQUEST_LATENCY.labels(method=method, path=path).observe(duration)
            REQUEST_COUNT.labels(method=method, path=path, status_code=status_code).inc()
            REQUEST_IN_PROGRESS.labels(method=method).dec()

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
