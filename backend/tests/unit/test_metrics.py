"""Unit tests for Prometheus metrics instrumentation."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient


def test_route_path_uses_template() -> None:
    from cirkit.observability.metrics import _get_route_path

    request = MagicMock()
    request.scope = {"route": MagicMock(path="/api/v1/pc-build/components")}

    assert _get_route_path(request) == "/api/v1/pc-build/components"


def test_route_path_unknown_without_route() -> None:
    from cirkit.observability.metrics import _get_route_path

    request = MagicMock()
    request.scope = {}

    assert _get_route_path(request) == "unknown"


def test_ai_suggest_counter_is_exported() -> None:
    from cirkit.main import create_app
    from cirkit.observability.metrics import AI_SUGGEST_REQUESTS

    AI_SUGGEST_REQUESTS.labels(outcome="streamed").inc()
    client = TestClient(create_app())

    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'ai_suggest_requests_total{outcome="streamed"}' in response.text
