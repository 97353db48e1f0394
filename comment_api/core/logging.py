"""structlog setup.

Both structlog events and plain ``logging`` records (uvicorn, the
Cassandra driver) go through the same processor chain and end up on the
console and, when enabled, in rotating JSON files.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from comment_api.core.context import get_context


if TYPE_CHECKING:
    from comment_api.config.settings import Settings


SENSITIVE_KEYS = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "api_key",
        "authorization",
        "credentials",
    }
)

# Values up to this length are hidden entirely
_FULL_MASK_MAX = 4

# Third-party loggers kept at WARNING whatever the root level
_QUIET_LOGGERS = ("uvicorn.access", "uvicorn.error", "cassandra", "httpx")


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp the current request's identifiers on the event."""
    event_dict.update(get_context())
    return event_dict


def add_app_info_processor(
    app_name: str,
    app_version: str,
    environment: str,
) -> Processor:
    """Build a processor that stamps service identity on every event."""
    app_info = {"app": app_name, "version": app_version, "environment": environment}

    def processor(
        logger: logging.Logger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.update(app_info)
        return event_dict

    return processor


def mask_value(key: str, value: Any) -> Any:
    """Hide ``value`` if ``key`` names a secret; nested dicts are walked.

    Longer secrets keep their first and last two characters.
    """
    if isinstance(value, dict):
        return {k: mask_value(k, v) for k, v in value.items()}
    if not isinstance(value, str):
        return value
    lowered = key.lower()
    if not any(sensitive in lowered for sensitive in SENSITIVE_KEYS):
        return value
    if len(value) <= _FULL_MASK_MAX:
        return "***"
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    return {k: mask_value(k, v) for k, v in event_dict.items()}


def build_shared_processors(settings: "Settings") -> list[Processor]:
    """Processors applied to both structlog and stdlib log records."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        add_app_info_processor(
            settings.app_name, settings.app_version, settings.environment
        ),
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.log_include_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )
    return processors


def _formatted(
    handler: logging.Handler,
    level: str,
    renderer: Processor,
    shared_processors: list[Processor],
) -> logging.Handler:
    handler.setLevel(level.upper())
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    return handler


def _rotating_file(path: Path, settings: "Settings") -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(path),
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )


def configure_structlog(
    settings: "Settings",
    log_dir: Path | str | None = None,
) -> None:
    """Route all logging through structlog.

    Args:
        settings: Application settings.
        log_dir: Directory for log files. Defaults to ``settings.log_dir``.
    """
    shared = build_shared_processors(settings)
    json_renderer = structlog.processors.JSONRenderer()
    if settings.log_format == "json":
        console_renderer: Processor = json_renderer
    else:
        console_renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    handlers = [
        _formatted(
            logging.StreamHandler(sys.stdout),
            settings.log_level,
            console_renderer,
            shared,
        )
    ]
    if settings.log_to_file:
        directory = Path(log_dir if log_dir is not None else settings.log_dir)
        # Everything at log_level, plus a file with errors only
        for filename, level in (
            (f"{settings.app_name}.log", settings.log_level),
            (f"{settings.app_name}.error.log", "ERROR"),
        ):
            handlers.append(
                _formatted(
                    _rotating_file(directory / filename, settings),
                    level,
                    json_renderer,
                    shared,
                )
            )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(settings.log_level.upper())
    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)
