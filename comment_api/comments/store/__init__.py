"""Comment store backends.

The router never touches a store directly; it goes through CommentService,
which receives a CommentStore at construction time.
"""

from .base import CommentStore
from .cassandra_store import CassandraCommentStore
from .memory_store import InMemoryCommentStore


__all__ = [
    "CassandraCommentStore",
    "CommentStore",
    "InMemoryCommentStore",
]
