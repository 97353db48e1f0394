"""Tests for request header handling in the middleware."""

from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from comment_api.core.middleware import trace_id_from
from tests.conftest import BASE


def test_explicit_trace_header_wins():
    headers = Headers(
        {
            "X-Trace-ID": "mine",
            "X-B3-TraceId": "b3",
            "traceparent": "00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01",
        }
    )

    assert trace_id_from(headers) == "mine"


def test_b3_trace_header():
    assert trace_id_from(Headers({"X-B3-TraceId": "b3"})) == "b3"


def test_traceparent_trace_id():
    headers = Headers(
        {"traceparent": "00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01"}
    )

    assert trace_id_from(headers) == "0af7651916cd43dd8448eb211c80319c"


def test_no_trace_headers():
    assert trace_id_from(Headers({})) is None
    assert trace_id_from(Headers({"traceparent": "garbage"})) is None


def test_cors_preflight_is_answered_before_request_context(client: TestClient):
    response = client.options(
        BASE,
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert "access-control-allow-methods" in response.headers
    assert "x-request-id" not in response.headers


def test_request_context_tags_regular_responses(client: TestClient):
    response = client.get(BASE, headers={"Origin": "http://example.com"})

    assert response.headers["X-Request-ID"]
    assert response.headers["access-control-allow-origin"]
