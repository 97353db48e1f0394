"""Cassandra-backed comment store.

Every comment lives in three tables (by id, by post, by user). The rows
of one comment are always written and deleted together in a single
logged batch; reads use whichever table has the right partition key.
Queries that span every partition (list all, global recent, search) scan
comments_by_id and sort or filter in memory, since CQL has no
cross-partition ORDER BY and no LIKE on regular columns.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, Any

import structlog
from cassandra import DriverException, RequestExecutionException
from cassandra.cluster import NoHostAvailable
from cassandra.query import BatchStatement, BatchType

from comment_api.comments.exceptions import CommentStoreError
from comment_api.comments.models import Comment, create_comment, utc_now

from .base import CommentStore, check_fields


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)

STORE_ERRORS = (DriverException, RequestExecutionException, NoHostAvailable)

# (prepared statement, bind values) pairs that make up one batch
Writes = list[tuple[Any, list[Any]]]


class CassandraCommentStore(CommentStore):
    """Comment store on a cassandra-asyncio session."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session and prepare statements."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        ks = self.keyspace

        # Writes
        self._insert_by_id = self.session.prepare(f"""
            INSERT INTO {ks}.comments_by_id
            (comment_id, post_id, user_id, content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)

        self._insert_by_post = self.session.prepare(f"""
            INSERT INTO {ks}.comments_by_post
            (post_id, created_at, comment_id, user_id, content, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)

        self._insert_by_user = self.session.prepare(f"""
            INSERT INTO {ks}.comments_by_user
            (user_id, created_at, comment_id, post_id, content, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)

        self._delete_by_id = self.session.prepare(f"""
            DELETE FROM {ks}.comments_by_id WHERE comment_id = ?
        """)

        self._delete_by_post = self.session.prepare(f"""
            DELETE FROM {ks}.comments_by_post
            WHERE post_id = ? AND created_at = ? AND comment_id = ?
        """)

        self._delete_by_user = self.session.prepare(f"""
            DELETE FROM {ks}.comments_by_user
            WHERE user_id = ? AND created_at = ? AND comment_id = ?
        """)

        # Reads
        self._get_by_id = self.session.prepare(f"""
            SELECT * FROM {ks}.comments_by_id WHERE comment_id = ?
        """)

        self._get_all = self.session.prepare(f"""
            SELECT * FROM {ks}.comments_by_id
        """)

        self._get_by_post = self.session.prepare(f"""
            SELECT * FROM {ks}.comments_by_post WHERE post_id = ?
        """)

        self._get_by_post_limit = self.session.prepare(f"""
            SELECT * FROM {ks}.comments_by_post WHERE post_id = ? LIMIT ?
        """)

        self._get_by_user = self.session.prepare(f"""
            SELECT * FROM {ks}.comments_by_user WHERE user_id = ?
        """)

        self._get_by_user_limit = self.session.prepare(f"""
            SELECT * FROM {ks}.comments_by_user WHERE user_id = ? LIMIT ?
        """)

        # Counts
        self._count_by_post = self.session.prepare(f"""
            SELECT COUNT(*) FROM {ks}.comments_by_post WHERE post_id = ?
        """)

        self._count_by_user = self.session.prepare(f"""
            SELECT COUNT(*) FROM {ks}.comments_by_user WHERE user_id = ?
        """)

    async def _execute(self, statement: Any, params: list[Any] | None = None) -> Any:
        """Run one statement, turning driver failures into CommentStoreError."""
        try:
            return await self.session.aexecute(statement, params)
        except STORE_ERRORS as e:
            logger.error(
                "comment_store_query_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise CommentStoreError from e

    async def _apply(self, writes: Writes) -> None:
        """Apply writes as one logged batch: all of them land or none do."""
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        for statement, params in writes:
            batch.add(statement, params)
        await self._execute(batch)

    def _row_inserts(self, comment: Comment) -> Writes:
        return [
            (
                self._insert_by_id,
                [
                    comment.comment_id,
                    comment.post_id,
                    comment.user_id,
                    comment.content,
                    comment.created_at,
                    comment.updated_at,
                ],
            ),
            (
                self._insert_by_post,
                [
                    comment.post_id,
                    comment.created_at,
                    comment.comment_id,
                    comment.user_id,
                    comment.content,
                    comment.updated_at,
                ],
            ),
            (
                self._insert_by_user,
                [
                    comment.user_id,
                    comment.created_at,
                    comment.comment_id,
                    comment.post_id,
                    comment.content,
                    comment.updated_at,
                ],
            ),
        ]

    def _post_row_delete(self, comment: Comment) -> tuple[Any, list[Any]]:
        return (
            self._delete_by_post,
            [comment.post_id, comment.created_at, comment.comment_id],
        )

    def _user_row_delete(self, comment: Comment) -> tuple[Any, list[Any]]:
        return (
            self._delete_by_user,
            [comment.user_id, comment.created_at, comment.comment_id],
        )

    def _row_deletes(self, comment: Comment) -> Writes:
        return [
            (self._delete_by_id, [comment.comment_id]),
            self._post_row_delete(comment),
            self._user_row_delete(comment),
        ]

    # ==========================================================================
    # Reads
    # ==========================================================================

    async def find(
        self,
        post_id: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
        newest_first: bool = False,
    ) -> list[Comment]:
        # Partition tables are already clustered newest first
        if post_id is not None:
            if limit is not None and user_id is None:
                rows = await self._execute(self._get_by_post_limit, [post_id, limit])
            else:
                rows = await self._execute(self._get_by_post, [post_id])
        elif user_id is not None:
            if limit is not None:
                rows = await self._execute(self._get_by_user_limit, [user_id, limit])
            else:
                rows = await self._execute(self._get_by_user, [user_id])
        else:
            rows = await self._execute(self._get_all)

        comments = [Comment.from_row(row) for row in rows]

        if post_id is not None and user_id is not None:
            comments = [c for c in comments if c.user_id == user_id]
        if newest_first and post_id is None and user_id is None:
            comments.sort(key=lambda c: c.created_at, reverse=True)
        if limit is not None:
            comments = comments[:limit]

        return comments

    async def find_by_id(self, comment_id: str) -> Comment | None:
        result = await self._execute(self._get_by_id, [comment_id])
        row = result.one()
        return Comment.from_row(row) if row else None

    async def count(
        self, post_id: str | None = None, user_id: str | None = None
    ) -> int:
        # A single partition key is counted server side; anything else
        # has no table to count on
        if post_id is not None and user_id is None:
            result = await self._execute(self._count_by_post, [post_id])
        elif user_id is not None and post_id is None:
            result = await self._execute(self._count_by_user, [user_id])
        else:
            return len(await self.find(post_id=post_id, user_id=user_id))

        row = result.one()
        return row.count if row else 0

    async def search(self, keyword: str) -> list[Comment]:
        needle = keyword.lower()
        rows = await self._execute(self._get_all)
        return [
            Comment.from_row(row)
            for row in rows
            if row.content and needle in row.content.lower()
        ]

    # ==========================================================================
    # Writes
    # ==========================================================================

    async def create(self, fields: dict[str, Any]) -> Comment:
        comment = create_comment(**check_fields(fields, require_all=True))
        await self._apply(self._row_inserts(comment))
        return comment

    async def update(self, comment_id: str, fields: dict[str, Any]) -> Comment | None:
        changes = check_fields(fields, require_all=False)

        current = await self.find_by_id(comment_id)
        if current is None:
            return None

        updated = replace(current, **changes, updated_at=utc_now())

        # Moving to another partition leaves the old row behind otherwise
        writes: Writes = []
        if updated.post_id != current.post_id:
            writes.append(self._post_row_delete(current))
        if updated.user_id != current.user_id:
            writes.append(self._user_row_delete(current))
        writes.extend(self._row_inserts(updated))

        await self._apply(writes)
        return updated

    async def delete(self, comment_id: str) -> Comment | None:
        current = await self.find_by_id(comment_id)
        if current is None:
            return None

        await self._apply(self._row_deletes(current))
        return current

    async def delete_many(
        self, post_id: str | None = None, user_id: str | None = None
    ) -> int:
        doomed = await self.find(post_id=post_id, user_id=user_id)
        for comment in doomed:
            await self._apply(self._row_deletes(comment))
        return len(doomed)
