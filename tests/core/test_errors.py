"""Tests for the app-wide error bodies."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from comment_api.comments.store import InMemoryCommentStore
from comment_api.main import create_app
from tests.conftest import BASE


def test_unexpected_exception_is_a_fixed_500():
    store = InMemoryCommentStore()
    store.find = AsyncMock(side_effect=RuntimeError("driver exploded"))
    client = TestClient(create_app(comment_store=store), raise_server_exceptions=False)

    response = client.get(BASE)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}
    assert "driver exploded" not in response.text


def test_method_not_allowed_uses_error_body(client: TestClient):
    response = client.patch(f"{BASE}/some-id")

    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
    assert "allow" in response.headers
