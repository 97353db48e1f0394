"""Comment resource module.

Provides CRUD, per-post/per-user listing and counting, recent-N queries
and content search over a pluggable comment store.

Note: Router is not exported here to avoid circular imports.
Import directly from comment_api.comments.router when needed.
"""

from .exceptions import (
    CommentError,
    CommentNotFoundError,
    CommentStoreError,
    InvalidCommentError,
    InvalidNumberError,
    MissingKeywordError,
)
from .models import COMMENTS_TABLES_CQL, Comment
from .service import CommentService
from .store import CassandraCommentStore, CommentStore, InMemoryCommentStore


__all__ = [
    "COMMENTS_TABLES_CQL",
    "CassandraCommentStore",
    "Comment",
    "CommentError",
    "CommentNotFoundError",
    "CommentService",
    "CommentStore",
    "CommentStoreError",
    "InMemoryCommentStore",
    "InvalidCommentError",
    "InvalidNumberError",
    "MissingKeywordError",
]
