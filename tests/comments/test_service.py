"""Tests for CommentService over a mocked store."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from comment_api.comments.exceptions import (
    CommentNotFoundError,
    CommentStoreError,
    InvalidNumberError,
    MissingKeywordError,
)
from comment_api.comments.models import Comment
from comment_api.comments.service import CommentService, parse_limit
from comment_api.comments.store import CommentStore


@pytest.fixture
def mock_store():
    """Mock comment store with awaitable operations."""
    store = Mock(spec=CommentStore)
    for name in (
        "find",
        "find_by_id",
        "count",
        "create",
        "update",
        "delete",
        "delete_many",
        "search",
    ):
        setattr(store, name, AsyncMock())
    return store


@pytest.fixture
def comment_service(mock_store) -> CommentService:
    return CommentService(mock_store)


@pytest.fixture
def comment() -> Comment:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    return Comment(
        comment_id="c1",
        post_id="p1",
        user_id="u1",
        content="hello",
        created_at=now,
        updated_at=now,
    )


class TestParseLimit:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", 1), ("25", 25), ("007", 7), ("+2", 2), (" 4", 4)],
    )
    def test_accepts_positive_integers(self, raw, expected):
        assert parse_limit(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("3abc", 3), ("2.5", 2), ("1_0", 1), ("1e3", 1), ("10 ", 10)],
    )
    def test_reads_leading_integer_only(self, raw, expected):
        assert parse_limit(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["0", "-1", "-0", "abc", "", " ", ".5", "0x10", "+"]
    )
    def test_rejects_missing_or_non_positive_integer(self, raw):
        with pytest.raises(InvalidNumberError):
            parse_limit(raw)


class TestSingleComment:
    @pytest.mark.asyncio
    async def test_get_comment(self, comment_service, mock_store, comment):
        mock_store.find_by_id.return_value = comment

        assert await comment_service.get_comment("c1") is comment
        mock_store.find_by_id.assert_awaited_once_with("c1")

    @pytest.mark.asyncio
    async def test_get_missing_comment_raises(self, comment_service, mock_store):
        mock_store.find_by_id.return_value = None

        with pytest.raises(CommentNotFoundError):
            await comment_service.get_comment("nope")

    @pytest.mark.asyncio
    async def test_create_passes_fields_through(
        self, comment_service, mock_store, comment
    ):
        mock_store.create.return_value = comment
        fields = {"post_id": "p1", "user_id": "u1", "content": "hello"}

        assert await comment_service.create_comment(fields) is comment
        mock_store.create.assert_awaited_once_with(fields)

    @pytest.mark.asyncio
    async def test_update_missing_comment_raises(self, comment_service, mock_store):
        mock_store.update.return_value = None

        with pytest.raises(CommentNotFoundError):
            await comment_service.update_comment("nope", {"content": "x"})

    @pytest.mark.asyncio
    async def test_delete_missing_comment_raises(self, comment_service, mock_store):
        mock_store.delete.return_value = None

        with pytest.raises(CommentNotFoundError):
            await comment_service.delete_comment("nope")

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, comment_service, mock_store):
        mock_store.find.side_effect = CommentStoreError()

        with pytest.raises(CommentStoreError):
            await comment_service.list_comments()


class TestQueries:
    @pytest.mark.asyncio
    async def test_filters_reach_the_store(self, comment_service, mock_store):
        mock_store.count.return_value = 3
        mock_store.delete_many.return_value = 2

        await comment_service.list_comments_by_post("p1")
        await comment_service.list_comments_by_user("u1")
        assert await comment_service.count_comments_by_post("p1") == 3
        assert await comment_service.delete_comments_by_user("u1") == 2

        assert mock_store.find.await_args_list[0].kwargs == {"post_id": "p1"}
        assert mock_store.find.await_args_list[1].kwargs == {"user_id": "u1"}
        mock_store.count.assert_awaited_once_with(post_id="p1")
        mock_store.delete_many.assert_awaited_once_with(user_id="u1")

    @pytest.mark.asyncio
    async def test_recent_requests_newest_first(self, comment_service, mock_store):
        mock_store.find.return_value = []

        await comment_service.recent_comments("5", post_id="p1")

        mock_store.find.assert_awaited_once_with(
            post_id="p1", user_id=None, limit=5, newest_first=True
        )

    @pytest.mark.asyncio
    async def test_recent_invalid_n_never_reaches_store(
        self, comment_service, mock_store
    ):
        with pytest.raises(InvalidNumberError):
            await comment_service.recent_comments("0")

        mock_store.find.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keyword", [None, ""])
    async def test_search_requires_keyword(self, comment_service, mock_store, keyword):
        with pytest.raises(MissingKeywordError):
            await comment_service.search_comments(keyword)

        mock_store.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_search(self, comment_service, mock_store, comment):
        mock_store.search.return_value = [comment]

        assert await comment_service.search_comments("hel") == [comment]
        mock_store.search.assert_awaited_once_with("hel")
