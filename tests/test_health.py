"""Tests for health endpoints and app wiring."""

from fastapi.testclient import TestClient

from comment_api.main import create_app


def test_liveness(client: TestClient) -> None:
    """Test the liveness endpoint."""
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_readiness(client: TestClient) -> None:
    """Readiness reports ready once a comment service is wired."""
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["store"] == "memory"
    assert "environment" in data
    assert "debug" in data


def test_readiness_before_startup() -> None:
    """Readiness reports starting until the lifespan has built a store."""
    client = TestClient(create_app())
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "starting"


def test_health(client: TestClient) -> None:
    """Test the general health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["app_name"] == "comment-api"
    assert "version" in data
    assert "environment" in data


def test_root(client: TestClient) -> None:
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Comment API"
    assert "version" in data


def test_lifespan_builds_store_from_settings() -> None:
    """Without an injected store, startup builds the configured backend."""
    app = create_app()
    assert app.state.comment_service is None

    with TestClient(app) as client:
        assert client.get("/health/ready").json()["status"] == "ready"
        response = client.post(
            "/api/comments",
            json={"postId": "p1", "userId": "u1", "content": "hi"},
        )
        assert response.status_code == 201


def test_request_id_is_generated(client: TestClient) -> None:
    """Every response carries a request id."""
    response = client.get("/health/live")
    assert response.headers["X-Request-ID"]


def test_request_id_is_echoed(client: TestClient) -> None:
    """A caller-supplied request id is returned unchanged."""
    response = client.get("/health/live", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_unknown_route_uses_error_body(client: TestClient) -> None:
    """Framework 404s share the {"error": ...} body shape."""
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
