"""Comment domain errors.

Each error carries a client-safe ``message`` and a machine ``code`` used
by the router to pick the status code. Driver and validation details
never end up in ``message``.
"""


class CommentError(Exception):
    """Base comment error."""

    def __init__(self, message: str, code: str = "comment_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class CommentNotFoundError(CommentError):
    """No comment with the requested id."""

    def __init__(self, message: str = "Comment not found"):
        super().__init__(message, "comment_not_found")


class InvalidNumberError(CommentError):
    """The ``n`` of a recent-comments query is not a positive integer."""

    def __init__(self, message: str = "Invalid number"):
        super().__init__(message, "invalid_number")


class MissingKeywordError(CommentError):
    """Search was called without a keyword."""

    def __init__(self, message: str = "Keyword query parameter is required"):
        super().__init__(message, "missing_keyword")


class InvalidCommentError(CommentError):
    """The store rejected the comment fields."""

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message, "bad_request")


class CommentStoreError(CommentError):
    """The backing store failed (connectivity, timeout, internal error)."""

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message, "store_failure")
