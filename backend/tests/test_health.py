import logging

from fastapi.testclient import TestClient

from lunite.core.context import request_id_ctx_var
from lunite.core.logging import RequestIdFilter


def _get_client() -> TestClient:
    from lunite.main import app

    return TestClient(app)


def test_health_endpoint_returns_ok() -> None:
    response = _get_client().get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_generated_and_returned() -> None:
    response = _get_client().get("/health")

    assert response.headers.get("X-Request-Id")


def test_request_id_echoed_from_header() -> None:
    response = _get_client().get("/health", headers={"X-Request-Id": "test-request-id-123"})

    assert response.headers.get("X-Request-Id") == "test-request-id-123"


def test_request_id_filter_stamps_records() -> None:
    record = logging.LogRecord("lunite", logging.INFO, __file__, 1, "msg", None, None)
    token = request_id_ctx_var.set("req-42")
    try:
        assert RequestIdFilter().filter(record)
    finally:
        request_id_ctx_var.reset(token)
    assert record.request_id == "req-42"

    outside = logging.LogRecord("lunite", logging.INFO, __file__, 1, "msg", None, None)
    RequestIdFilter().filter(outside)
    assert outside.request_id == "-"
