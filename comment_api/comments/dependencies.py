"""FastAPI dependencies for the comment routes.

Provides dependency injection for:
- Comment service (built at startup, kept on app.state)
- Error mapping from comment errors to HTTP exceptions
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .exceptions import CommentError
from .service import CommentService


async def get_comment_service(request: Request) -> CommentService:
    """Get comment service from app state."""
    comment_service = getattr(request.app.state, "comment_service", None)
    if comment_service is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Comment service not initialized",
        )
    return comment_service


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


def handle_comment_error(
    error: CommentError,
    fallback_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> HTTPException:
    """Convert comment errors to HTTP exceptions.

    Args:
        error: Comment error
        fallback_status: Status for store failures on this route (500 for
            reads and deletes, 400 for create and update)

    Returns:
        HTTPException with the error's client-safe message
    """
    status_map = {
        "comment_not_found": status.HTTP_404_NOT_FOUND,
        "invalid_number": status.HTTP_400_BAD_REQUEST,
        "missing_keyword": status.HTTP_400_BAD_REQUEST,
        "bad_request": status.HTTP_400_BAD_REQUEST,
    }

    status_code = status_map.get(error.code, fallback_status)

    # A store failure on create/update reads as a plain bad request
    message = error.message
    if status_code == status.HTTP_400_BAD_REQUEST and error.code == "store_failure":
        message = "Bad Request"

    return HTTPException(status_code=status_code, detail=message)
