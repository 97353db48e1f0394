"""Per-request identifiers kept in contextvars.

RequestContextMiddleware binds them when a request arrives; the logging
pipeline stamps whichever are set onto every event.
"""

from contextvars import ContextVar
from uuid import uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_LOGGED_VARS = {
    "request_id": request_id_var,
    "trace_id": trace_id_var,
    "correlation_id": correlation_id_var,
}


def bind_request(
    request_id: str | None = None,
    trace_id: str | None = None,
    correlation_id: str | None = None,
) -> str:
    """Bind the identifiers of the request being served.

    A missing request ID is generated.

    Returns:
        The request ID now in effect.
    """
    rid = request_id or str(uuid4())
    request_id_var.set(rid)
    trace_id_var.set(trace_id)
    correlation_id_var.set(correlation_id)
    return rid


def get_context() -> dict[str, str]:
    """The identifiers that are currently set, keyed by log field name."""
    return {name: value for name, var in _LOGGED_VARS.items() if (value := var.get())}


def clear_context() -> None:
    """Forget the current request's identifiers."""
    request_id_var.set("")
    trace_id_var.set(None)
    correlation_id_var.set(None)
