"""Comment store interface."""

from abc import ABC, abstractmethod
from typing import Any

from comment_api.comments.exceptions import InvalidCommentError
from comment_api.comments.models import WRITABLE_FIELDS, Comment


def check_fields(fields: dict[str, Any], *, require_all: bool) -> dict[str, str]:
    """Validate comment fields the way every backend must.

    Only writable fields are accepted and each must be a non-empty string.

    Raises:
        InvalidCommentError: On an unknown, missing or malformed field
    """
    unknown = set(fields) - set(WRITABLE_FIELDS)
    if unknown:
        raise InvalidCommentError
    if require_all and set(fields) != set(WRITABLE_FIELDS):
        raise InvalidCommentError
    for value in fields.values():
        if not isinstance(value, str) or not value:
            raise InvalidCommentError
    return dict(fields)


class CommentStore(ABC):
    """Document-store contract the comment service relies on.

    Single-item operations return ``None`` when no comment matches.
    Backend failures are raised as ``CommentStoreError``; field values a
    backend cannot persist are raised as ``InvalidCommentError``.
    """

    @abstractmethod
    async def find(
        self,
        post_id: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
        newest_first: bool = False,
    ) -> list[Comment]:
        """Find comments matching the given exact-match filters.

        Args:
            post_id: Only comments on this post
            user_id: Only comments by this user
            limit: Maximum number of comments to return
            newest_first: Order by created_at descending; ties keep the
                backend's native order

        Returns:
            Matching comments, in backend order unless newest_first is set
        """

    @abstractmethod
    async def find_by_id(self, comment_id: str) -> Comment | None:
        """Find a comment by ID."""

    @abstractmethod
    async def count(
        self, post_id: str | None = None, user_id: str | None = None
    ) -> int:
        """Count comments matching the given exact-match filters."""

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> Comment:
        """Persist a new comment and return it with its assigned id."""

    @abstractmethod
    async def update(self, comment_id: str, fields: dict[str, Any]) -> Comment | None:
        """Overwrite the given fields and return the post-update comment."""

    @abstractmethod
    async def delete(self, comment_id: str) -> Comment | None:
        """Delete a comment and return what was deleted."""

    @abstractmethod
    async def delete_many(
        self, post_id: str | None = None, user_id: str | None = None
    ) -> int:
        """Delete every comment matching the filters, returning the count."""

    @abstractmethod
    async def search(self, keyword: str) -> list[Comment]:
        """Find comments whose content contains keyword, ignoring case.

        The keyword is matched literally, it is not a pattern.
        """
