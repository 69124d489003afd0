"""
Incident Tracker - Logging Infrastructure

Structured logging on top of the standard library:
- JSON lines when LOG_FORMAT=json (production)
- Plain console output otherwise
- The current request id attached to every entry
- Operation timing for store calls
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, ParamSpec

import structlog
from structlog.types import Processor

from incident_tracker.core.config import Settings, get_settings

# Set by RequestContextMiddleware for the duration of a request
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

P = ParamSpec("P")
R = TypeVar("R")

# Request logging is done by RequestContextMiddleware
QUIETED_LOGGERS = ("uvicorn.access",)


def add_context_variables(
    logger: logging.Logger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Add the current request id to every log entry."""
    request_id = request_id_context.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


@contextmanager
def bind_request_id(request_id: str) -> Iterator[None]:
    """
    Attach ``request_id`` to log entries emitted inside the block.

    Example:
        >>> with bind_request_id("req-123"):
        ...     log.info("incident_created")
    """
    token = request_id_context.set(request_id)
    try:
        yield
    finally:
        request_id_context.reset(token)


def get_log_level(settings: Settings) -> int:
    """Resolve LOG_LEVEL to a logging constant, INFO when unrecognized."""
    return logging.getLevelNamesMapping().get(settings.LOG_LEVEL.upper(), logging.INFO)


def get_processors(settings: Settings) -> list[Processor]:
    """Build the structlog processor chain for the configured output format."""
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_variables,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        return shared + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return shared + [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structured logging for the application.

    Called by the application factory; calling it again replaces the
    previous configuration.
    """
    settings = settings or get_settings()
    level = get_log_level(settings)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )
    for name in QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("incident_created", incident_id="123", severity="SEV1")
    """
    return structlog.get_logger(name)


def log_execution_time(
    log: structlog.stdlib.BoundLogger,
    operation: str,
    **extra_fields: Any
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator emitting ``<operation>_completed`` or ``<operation>_failed``
    with the call duration in milliseconds.

    Exceptions are logged and re-raised unchanged.

    Example:
        >>> @log_execution_time(log, "incident_list")
        ... def list_incidents(db, query):
        ...     ...
    """
    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()

            def elapsed_ms() -> float:
                return round((time.perf_counter() - start_time) * 1000, 2)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"{operation}_failed",
                    duration_ms=elapsed_ms(),
                    success=False,
                    error=str(e),
                    error_type=type(e).__name__,
                    **extra_fields
                )
                raise

            log.info(
                f"{operation}_completed",
                duration_ms=elapsed_ms(),
                success=True,
                **extra_fields
            )
            return result
        return wrapper
    return decorator
