"""Comment API endpoints.

Provides routes for:
- Comment CRUD (create, read, update, delete)
- Listing, counting and bulk deletion by post or by user
- Most recent N comments (global, per post, per user)
- Case-insensitive content search

Each handler makes exactly one service call and maps comment errors to a
fixed status code. Error bodies never carry driver or validation detail.
"""

from fastapi import APIRouter, Query, status

from .dependencies import CommentServiceDep, handle_comment_error
from .exceptions import CommentError
from .schemas import (
    CommentResponse,
    CountResponse,
    CreateCommentRequest,
    ErrorResponse,
    MessageResponse,
    UpdateCommentRequest,
)


router = APIRouter(tags=["comments"])


def _error_responses(*codes: int) -> dict[int | str, dict]:
    return {code: {"model": ErrorResponse} for code in codes}


def _to_response(comments) -> list[CommentResponse]:
    return [CommentResponse.from_comment(comment) for comment in comments]


def _deleted_message(count: int) -> MessageResponse:
    return MessageResponse(message=f"{count} comments deleted successfully")


# ==============================================================================
# Collection
# ==============================================================================


@router.get(
    "",
    response_model=list[CommentResponse],
    responses=_error_responses(500),
    summary="List comments",
)
@router.get("/", response_model=list[CommentResponse], include_in_schema=False)
async def list_comments(comment_service: CommentServiceDep) -> list[CommentResponse]:
    """Get all comments."""
    try:
        return _to_response(await comment_service.list_comments())
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_error_responses(400),
    summary="Create comment",
)
@router.post(
    "/",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_comment(
    data: CreateCommentRequest,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    """Create a new comment. Unknown body fields are ignored."""
    try:
        comment = await comment_service.create_comment(data.to_fields())
        return CommentResponse.from_comment(comment)
    except CommentError as e:
        raise handle_comment_error(e, status.HTTP_400_BAD_REQUEST) from e


@router.get(
    "/search",
    response_model=list[CommentResponse],
    responses=_error_responses(400, 500),
    summary="Search comments",
)
async def search_comments(
    comment_service: CommentServiceDep,
    keyword: str | None = Query(None, description="Text to look for in content"),
) -> list[CommentResponse]:
    """Find comments whose content contains the keyword, ignoring case.

    The keyword is matched literally.
    """
    try:
        return _to_response(await comment_service.search_comments(keyword))
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.get(
    "/recent/{n}",
    response_model=list[CommentResponse],
    responses=_error_responses(400, 500),
    summary="Most recent comments",
)
async def recent_comments(
    n: str,
    comment_service: CommentServiceDep,
) -> list[CommentResponse]:
    """Get up to n comments, newest first."""
    try:
        return _to_response(await comment_service.recent_comments(n))
    except CommentError as e:
        raise handle_comment_error(e) from e


# ==============================================================================
# By post
# ==============================================================================


@router.get(
    "/post/{post_id}",
    response_model=list[CommentResponse],
    responses=_error_responses(500),
    summary="List post comments",
)
async def list_post_comments(
    post_id: str,
    comment_service: CommentServiceDep,
) -> list[CommentResponse]:
    """Get all comments on a post."""
    try:
        return _to_response(await comment_service.list_comments_by_post(post_id))
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.get(
    "/post/{post_id}/count",
    response_model=CountResponse,
    responses=_error_responses(500),
    summary="Count post comments",
)
async def count_post_comments(
    post_id: str,
    comment_service: CommentServiceDep,
) -> CountResponse:
    """Count comments on a post."""
    try:
        return CountResponse(
            count=await comment_service.count_comments_by_post(post_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.get(
    "/post/{post_id}/recent/{n}",
    response_model=list[CommentResponse],
    responses=_error_responses(400, 500),
    summary="Most recent post comments",
)
async def recent_post_comments(
    post_id: str,
    n: str,
    comment_service: CommentServiceDep,
) -> list[CommentResponse]:
    """Get up to n comments on a post, newest first."""
    try:
        return _to_response(
            await comment_service.recent_comments(n, post_id=post_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.delete(
    "/post/{post_id}",
    response_model=MessageResponse,
    responses=_error_responses(500),
    summary="Delete post comments",
)
async def delete_post_comments(
    post_id: str,
    comment_service: CommentServiceDep,
) -> MessageResponse:
    """Delete every comment on a post."""
    try:
        return _deleted_message(
            await comment_service.delete_comments_by_post(post_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


# ==============================================================================
# By user
# ==============================================================================


@router.get(
    "/user/{user_id}",
    response_model=list[CommentResponse],
    responses=_error_responses(500),
    summary="List user comments",
)
async def list_user_comments(
    user_id: str,
    comment_service: CommentServiceDep,
) -> list[CommentResponse]:
    """Get all comments by a user."""
    try:
        return _to_response(await comment_service.list_comments_by_user(user_id))
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.get(
    "/user/{user_id}/count",
    response_model=CountResponse,
    responses=_error_responses(500),
    summary="Count user comments",
)
async def count_user_comments(
    user_id: str,
    comment_service: CommentServiceDep,
) -> CountResponse:
    """Count comments by a user."""
    try:
        return CountResponse(
            count=await comment_service.count_comments_by_user(user_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.get(
    "/user/{user_id}/recent/{n}",
    response_model=list[CommentResponse],
    responses=_error_responses(400, 500),
    summary="Most recent user comments",
)
async def recent_user_comments(
    user_id: str,
    n: str,
    comment_service: CommentServiceDep,
) -> list[CommentResponse]:
    """Get up to n comments by a user, newest first."""
    try:
        return _to_response(
            await comment_service.recent_comments(n, user_id=user_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.delete(
    "/user/{user_id}",
    response_model=MessageResponse,
    responses=_error_responses(500),
    summary="Delete user comments",
)
async def delete_user_comments(
    user_id: str,
    comment_service: CommentServiceDep,
) -> MessageResponse:
    """Delete every comment by a user."""
    try:
        return _deleted_message(
            await comment_service.delete_comments_by_user(user_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


# ==============================================================================
# Single comment (registered last so the fixed paths above win)
# ==============================================================================


@router.get(
    "/{comment_id}",
    response_model=CommentResponse,
    responses=_error_responses(404, 500),
    summary="Get comment",
)
async def get_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    """Get a comment by its ID."""
    try:
        return CommentResponse.from_comment(
            await comment_service.get_comment(comment_id)
        )
    except CommentError as e:
        raise handle_comment_error(e) from e


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    responses=_error_responses(400, 404),
    summary="Update comment",
)
async def update_comment(
    comment_id: str,
    data: UpdateCommentRequest,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    """Overwrite the fields present in the body and return the result."""
    try:
        comment = await comment_service.update_comment(comment_id, data.to_fields())
        return CommentResponse.from_comment(comment)
    except CommentError as e:
        raise handle_comment_error(e, status.HTTP_400_BAD_REQUEST) from e


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    responses=_error_responses(404, 500),
    summary="Delete comment",
)
async def delete_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
) -> MessageResponse:
    """Delete a comment by its ID."""
    try:
        await comment_service.delete_comment(comment_id)
        return MessageResponse(message="Comment deleted successfully")
    except CommentError as e:
        raise handle_comment_error(e) from e
