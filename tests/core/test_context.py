"""Tests for request context variables."""

import pytest

from comment_api.core.context import (
    bind_request,
    clear_context,
    get_context,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


def test_empty_context():
    assert get_context() == {}


def test_bind_request_generates_missing_id():
    rid = bind_request()

    assert rid
    assert get_context() == {"request_id": rid}


def test_get_context_includes_only_set_values():
    bind_request(request_id="req-1", correlation_id="corr-1")

    assert get_context() == {"request_id": "req-1", "correlation_id": "corr-1"}


def test_bind_request_replaces_previous_identifiers():
    bind_request(request_id="req-1", trace_id="trace-1")

    bind_request(request_id="req-2")

    assert get_context() == {"request_id": "req-2"}


def test_clear_context():
    bind_request(request_id="req-1", trace_id="trace-1", correlation_id="c-1")

    clear_context()

    assert get_context() == {}
