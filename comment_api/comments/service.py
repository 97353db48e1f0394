"""Comment service layer.

One method per store operation. The service turns the store's
absent-sentinel into CommentNotFoundError, validates the two inputs the
store cannot (``n`` for recent queries, the search keyword), and logs
every write.
"""

import re
from typing import Any

import structlog

from .exceptions import CommentNotFoundError, InvalidNumberError, MissingKeywordError
from .models import Comment
from .store import CommentStore


logger = structlog.get_logger(__name__)

# Leading whitespace, optional sign, then ASCII digits; the rest is ignored
LIMIT_PATTERN = re.compile(r"\s*([+-]?[0-9]+)")


def parse_limit(raw: str) -> int:
    """Parse the ``n`` of a recent-comments query.

    Only the leading integer counts, so ``"3abc"``, ``"2.5"`` and ``"1_0"``
    give 3, 2 and 1. No leading integer, or a value below 1, raises
    InvalidNumberError.
    """
    match = LIMIT_PATTERN.match(raw or "")
    if match is None:
        raise InvalidNumberError
    n = int(match.group(1))
    if n <= 0:
        raise InvalidNumberError
    return n


class CommentService:
    """Service for comment management."""

    def __init__(self, store: CommentStore):
        self.store = store

    # ==========================================================================
    # Single comment CRUD
    # ==========================================================================

    async def list_comments(self) -> list[Comment]:
        """Get every comment."""
        return await self.store.find()

    async def get_comment(self, comment_id: str) -> Comment:
        """Get a comment by ID.

        Raises:
            CommentNotFoundError: If no comment has this ID
        """
        comment = await self.store.find_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundError
        return comment

    async def create_comment(self, fields: dict[str, Any]) -> Comment:
        """Create a new comment; the store assigns id and timestamps."""
        comment = await self.store.create(fields)
        logger.info(
            "comment_created",
            comment_id=comment.comment_id,
            post_id=comment.post_id,
            user_id=comment.user_id,
        )
        return comment

    async def update_comment(self, comment_id: str, fields: dict[str, Any]) -> Comment:
        """Overwrite the given fields of a comment.

        Returns:
            The comment as stored after the update

        Raises:
            CommentNotFoundError: If no comment has this ID
        """
        comment = await self.store.update(comment_id, fields)
        if comment is None:
            raise CommentNotFoundError
        logger.info(
            "comment_updated",
            comment_id=comment_id,
            fields=sorted(fields),
        )
        return comment

    async def delete_comment(self, comment_id: str) -> Comment:
        """Delete a comment by ID.

        Raises:
            CommentNotFoundError: If no comment has this ID
        """
        comment = await self.store.delete(comment_id)
        if comment is None:
            raise CommentNotFoundError
        logger.info("comment_deleted", comment_id=comment_id)
        return comment

    # ==========================================================================
    # Per-post / per-user queries
    # ==========================================================================

    async def list_comments_by_post(self, post_id: str) -> list[Comment]:
        """Get all comments on a post."""
        return await self.store.find(post_id=post_id)

    async def list_comments_by_user(self, user_id: str) -> list[Comment]:
        """Get all comments by a user."""
        return await self.store.find(user_id=user_id)

    async def count_comments_by_post(self, post_id: str) -> int:
        """Count comments on a post."""
        return await self.store.count(post_id=post_id)

    async def count_comments_by_user(self, user_id: str) -> int:
        """Count comments by a user."""
        return await self.store.count(user_id=user_id)

    async def delete_comments_by_post(self, post_id: str) -> int:
        """Delete every comment on a post, returning how many were removed."""
        deleted = await self.store.delete_many(post_id=post_id)
        logger.info("comments_bulk_deleted", post_id=post_id, deleted=deleted)
        return deleted

    async def delete_comments_by_user(self, user_id: str) -> int:
        """Delete every comment by a user, returning how many were removed."""
        deleted = await self.store.delete_many(user_id=user_id)
        logger.info("comments_bulk_deleted", user_id=user_id, deleted=deleted)
        return deleted

    # ==========================================================================
    # Recent and search
    # ==========================================================================

    async def recent_comments(
        self,
        n: str,
        post_id: str | None = None,
        user_id: str | None = None,
    ) -> list[Comment]:
        """Get up to n comments, newest first, optionally filtered.

        ``n`` is validated before the store is touched.

        Raises:
            InvalidNumberError: If n is not a positive integer
        """
        limit = parse_limit(n)
        return await self.store.find(
            post_id=post_id,
            user_id=user_id,
            limit=limit,
            newest_first=True,
        )

    async def search_comments(self, keyword: str | None) -> list[Comment]:
        """Find comments whose content contains keyword (case-insensitive).

        Raises:
            MissingKeywordError: If keyword is missing or empty
        """
        if not keyword:
            raise MissingKeywordError
        return await self.store.search(keyword)
