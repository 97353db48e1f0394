"""Database models for the comment resource.

Cassandra table definitions for:
- comments_by_id: O(1) lookup, the source of truth for a comment
- comments_by_post: per-post listing, newest first
- comments_by_user: per-user listing, newest first

The per-post and per-user tables are denormalized copies kept in sync
by the store on every write.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4


# Fields a client may set. id and timestamps belong to the store.
WRITABLE_FIELDS = ("post_id", "user_id", "content")


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENTS_BY_ID_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_id (
    comment_id TEXT PRIMARY KEY,
    post_id TEXT,
    user_id TEXT,
    content TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

# Partition by post_id, clustering by created_at for "recent" queries
COMMENTS_BY_POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_post (
    post_id TEXT,
    created_at TIMESTAMP,
    comment_id TEXT,
    user_id TEXT,
    content TEXT,
    updated_at TIMESTAMP,
    PRIMARY KEY ((post_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at DESC, comment_id ASC)
"""

COMMENTS_BY_USER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_user (
    user_id TEXT,
    created_at TIMESTAMP,
    comment_id TEXT,
    post_id TEXT,
    content TEXT,
    updated_at TIMESTAMP,
    PRIMARY KEY ((user_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at DESC, comment_id ASC)
"""

COMMENTS_TABLES_CQL = [
    COMMENTS_BY_ID_TABLE_CQL,
    COMMENTS_BY_POST_TABLE_CQL,
    COMMENTS_BY_USER_TABLE_CQL,
]


def utc_now() -> datetime:
    """Current UTC time truncated to Cassandra's millisecond precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _as_utc(value: datetime) -> datetime:
    # The driver hands back naive datetimes that are already UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass
class Comment:
    """A comment on a post."""

    comment_id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from a Cassandra row of any comments table."""
        created_at = _as_utc(row.created_at)
        return cls(
            comment_id=row.comment_id,
            post_id=row.post_id,
            user_id=row.user_id,
            content=row.content,
            created_at=created_at,
            updated_at=_as_utc(row.updated_at) if row.updated_at else created_at,
        )


def create_comment(post_id: str, user_id: str, content: str) -> Comment:
    """Create a new comment with a fresh id and timestamps."""
    now = utc_now()
    return Comment(
        comment_id=str(uuid4()),
        post_id=post_id,
        user_id=user_id,
        content=content,
        created_at=now,
        updated_at=now,
    )
