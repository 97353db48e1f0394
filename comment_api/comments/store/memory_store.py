"""In-process comment store.

Backs the test suite and ``COMMENT_STORE_BACKEND=memory`` local runs.
Native order is insertion order.
"""

import asyncio
from dataclasses import replace
from typing import Any

from comment_api.comments.models import Comment, create_comment, utc_now

from .base import CommentStore, check_fields


class InMemoryCommentStore(CommentStore):
    """Comment store kept in a dict, keyed by comment id."""

    def __init__(self) -> None:
        self._comments: dict[str, Comment] = {}
        self._lock = asyncio.Lock()

    def _matching(self, post_id: str | None, user_id: str | None) -> list[Comment]:
        return [
            comment
            for comment in self._comments.values()
            if (post_id is None or comment.post_id == post_id)
            and (user_id is None or comment.user_id == user_id)
        ]

    async def find(
        self,
        post_id: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
        newest_first: bool = False,
    ) -> list[Comment]:
        comments = self._matching(post_id, user_id)
        if newest_first:
            # sorted() is stable, so equal timestamps keep insertion order
            comments = sorted(comments, key=lambda c: c.created_at, reverse=True)
        if limit is not None:
            comments = comments[:limit]
        return [replace(c) for c in comments]

    async def find_by_id(self, comment_id: str) -> Comment | None:
        comment = self._comments.get(comment_id)
        return replace(comment) if comment else None

    async def count(
        self, post_id: str | None = None, user_id: str | None = None
    ) -> int:
        return len(self._matching(post_id, user_id))

    async def create(self, fields: dict[str, Any]) -> Comment:
        comment = create_comment(**check_fields(fields, require_all=True))
        async with self._lock:
            self._comments[comment.comment_id] = comment
        return replace(comment)

    async def update(self, comment_id: str, fields: dict[str, Any]) -> Comment | None:
        changes = check_fields(fields, require_all=False)
        async with self._lock:
            current = self._comments.get(comment_id)
            if current is None:
                return None
            updated = replace(current, **changes, updated_at=utc_now())
            self._comments[comment_id] = updated
        return replace(updated)

    async def delete(self, comment_id: str) -> Comment | None:
        async with self._lock:
            return self._comments.pop(comment_id, None)

    async def delete_many(
        self, post_id: str | None = None, user_id: str | None = None
    ) -> int:
        async with self._lock:
            doomed = self._matching(post_id, user_id)
            for comment in doomed:
                del self._comments[comment.comment_id]
        return len(doomed)

    async def search(self, keyword: str) -> list[Comment]:
        needle = keyword.lower()
        return [
            replace(comment)
            for comment in self._comments.values()
            if needle in comment.content.lower()
        ]
