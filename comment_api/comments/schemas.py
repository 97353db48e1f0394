"""Pydantic schemas for the comment resource.

Wire format uses camelCase (postId, userId, createdAt); Python code uses
snake_case. Unknown request fields are dropped, never persisted.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateCommentRequest(BaseModel):
    """Request to create a new comment."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    post_id: str = Field(..., alias="postId", min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)
    content: str = Field(..., min_length=1)

    def to_fields(self) -> dict[str, Any]:
        """Fields to hand to the store."""
        return self.model_dump()


class UpdateCommentRequest(BaseModel):
    """Request to overwrite some fields of a comment.

    Only fields present in the body are changed.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    post_id: str | None = Field(None, alias="postId", min_length=1)
    user_id: str | None = Field(None, alias="userId", min_length=1)
    content: str | None = Field(None, min_length=1)

    @field_validator("post_id", "user_id", "content", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """An explicitly provided field must carry a value."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v

    def to_fields(self) -> dict[str, Any]:
        """Fields to hand to the store, limited to those actually sent."""
        return self.model_dump(exclude_unset=True)


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentResponse(BaseModel):
    """Response for a single comment."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    post_id: str = Field(alias="postId")
    user_id: str = Field(alias="userId")
    content: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_comment(cls, comment: Any) -> "CommentResponse":
        """Create response from Comment entity."""
        return cls(
            id=comment.comment_id,
            post_id=comment.post_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CountResponse(BaseModel):
    """Number of matching comments."""

    count: int


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned by every failing comment route."""

    error: str
