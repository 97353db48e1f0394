"""Shared fixtures.

Settings are read once and cached, so the environment is pinned here
before anything imports the application.
"""

import os


os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("COMMENT_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from comment_api.comments.models import Comment  # noqa: E402
from comment_api.comments.store import InMemoryCommentStore  # noqa: E402
from comment_api.main import create_app  # noqa: E402


BASE = "/api/comments"


@pytest.fixture
def store() -> InMemoryCommentStore:
    """Empty in-memory comment store."""
    return InMemoryCommentStore()


@pytest.fixture
def client(store: InMemoryCommentStore) -> TestClient:
    """Test client for an app serving comments from the in-memory store."""
    return TestClient(create_app(comment_store=store))


@pytest.fixture
def seed(store: InMemoryCommentStore):
    """Insert a comment with a chosen creation time straight into the store."""

    def _seed(
        comment_id: str,
        post_id: str = "p1",
        user_id: str = "u1",
        content: str = "some text",
        minute: int = 0,
    ) -> Comment:
        created_at = datetime(2024, 1, 1, 12, minute, tzinfo=UTC)
        comment = Comment(
            comment_id=comment_id,
            post_id=post_id,
            user_id=user_id,
            content=content,
            created_at=created_at,
            updated_at=created_at,
        )
        store._comments[comment_id] = comment
        return comment

    return _seed
