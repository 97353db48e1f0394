"""Tests for comment request and response schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from comment_api.comments.models import Comment
from comment_api.comments.schemas import (
    CommentResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)


class TestCreateCommentRequest:
    def test_camel_case_body(self):
        request = CreateCommentRequest.model_validate(
            {"postId": "p1", "userId": "u1", "content": "hi", "likes": 4}
        )

        assert request.to_fields() == {
            "post_id": "p1",
            "user_id": "u1",
            "content": "hi",
        }

    @pytest.mark.parametrize("missing", ["postId", "userId", "content"])
    def test_all_fields_required(self, missing):
        body = {"postId": "p1", "userId": "u1", "content": "hi"}
        del body[missing]

        with pytest.raises(ValidationError):
            CreateCommentRequest.model_validate(body)

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            CreateCommentRequest.model_validate(
                {"postId": "p1", "userId": "u1", "content": ""}
            )


class TestUpdateCommentRequest:
    def test_only_sent_fields_are_kept(self):
        request = UpdateCommentRequest.model_validate({"content": "new"})

        assert request.to_fields() == {"content": "new"}

    def test_empty_body_changes_nothing(self):
        assert UpdateCommentRequest.model_validate({}).to_fields() == {}

    def test_explicit_null_rejected(self):
        with pytest.raises(ValidationError):
            UpdateCommentRequest.model_validate({"postId": None})


class TestCommentResponse:
    def test_serializes_with_camel_case(self):
        now = datetime(2024, 1, 1, tzinfo=UTC)
        comment = Comment(
            comment_id="c1",
            post_id="p1",
            user_id="u1",
            content="hi",
            created_at=now,
            updated_at=now,
        )

        data = CommentResponse.from_comment(comment).model_dump(by_alias=True)

        assert data["id"] == "c1"
        assert data["postId"] == "p1"
        assert data["userId"] == "u1"
        assert data["createdAt"] == now
        assert data["updatedAt"] == now
