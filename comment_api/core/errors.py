"""App-wide exception handlers.

Every error leaves the service as ``{"error": <message>}``. Messages are
fixed strings; exception details only go to the log.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from comment_api.core.logging import get_logger


logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"
BAD_REQUEST_MESSAGE = "Bad Request"


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


async def on_http_exception(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """Client errors keep their detail; server errors get a fixed message."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=str(exc.detail),
        path=request.url.path,
    )
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        message = INTERNAL_ERROR_MESSAGE
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, exc.headers)


async def on_validation_error(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Malformed JSON and schema violations are a plain 400."""
    logger.warning(
        "request_validation_failed",
        fields=[".".join(map(str, err.get("loc", ()))) for err in exc.errors()],
        path=request.url.path,
    )
    return error_response(status.HTTP_400_BAD_REQUEST, BAD_REQUEST_MESSAGE)


async def on_unhandled_exception(request: Request, exc: Exception) -> ORJSONResponse:
    logger.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        path=request.url.path,
        request_id=getattr(request.state, "request_id", None),
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, on_http_exception)
    app.add_exception_handler(RequestValidationError, on_validation_error)
    app.add_exception_handler(Exception, on_unhandled_exception)
