"""Access logging and request identifiers."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from comment_api.core.context import bind_request, clear_context


logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"

# Checked in order; the first one present wins
TRACE_HEADERS = ("X-Trace-ID", "X-B3-TraceId")


def trace_id_from(headers: Headers) -> str | None:
    """Trace ID from our own or B3 headers, else from W3C ``traceparent``.

    traceparent is ``{version}-{trace-id}-{parent-id}-{flags}``.
    """
    for name in TRACE_HEADERS:
        if value := headers.get(name):
            return value

    parts = headers.get("traceparent", "").split("-")
    return parts[1] if len(parts) >= 2 else None


def client_ip(request: Request) -> str | None:
    """Original client address, looking through a proxy's X-Forwarded-For."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request identifiers for logging and log each request.

    The request ID is taken from ``X-Request-ID`` when the caller sends
    one and echoed back on the response either way.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or ())

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = bind_request(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            trace_id=trace_id_from(request.headers),
            correlation_id=request.headers.get(CORRELATION_ID_HEADER),
        )
        request.state.request_id = request_id

        path = request.url.path
        log = logger.bind(method=request.method, path=path)
        should_log = self.log_requests and not path.startswith(self.exclude_paths)

        if should_log:
            log.info(
                "request_started",
                query=str(request.query_params) or None,
                client_ip=client_ip(request),
                user_agent=request.headers.get("user-agent"),
            )

        try:
            response = await call_next(request)

            if should_log:
                log_method = log.warning if response.status_code >= 400 else log.info
                log_method(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            log.exception(
                "request_failed",
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        finally:
            clear_context()
