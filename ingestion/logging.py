"""
Structured logging for the ingestion service.

All modules log through structlog bound loggers obtained from get_logger().
Events are snake_case names with keyword fields:

    logger = get_logger("github.ingestion")
    logger.info("github_ingestion_started", user_id=str(user_id))

Development renders colored console lines; any other ENV renders one JSON
object per line. Request and branch context (request_id, source) is carried
in contextvars. Pool threads do not inherit it; code that hands work to a
ThreadPoolExecutor submits through contextvars.copy_context().run.
"""

import logging
import os
import sys
import time
from collections.abc import Callable, MutableMapping
from functools import lru_cache, wraps
from typing import Any, TypeVar

import structlog
from structlog.types import Processor

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "profile_ingestion"

# Field names whose values never reach a log sink
_SECRET_FIELDS = frozenset({"token", "github_token", "authorization", "password"})
_REDACTED = "***"


def _development_mode() -> bool:
    from .config import get_settings

    return get_settings().debug or os.getenv("ENV", "development") == "development"


def _tag_service(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _redact_secrets(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]):
    for key in _SECRET_FIELDS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = _REDACTED
    return event_dict


def build_processors(development: bool) -> list[Processor]:
    """Processor chain; the renderer at the end depends on the environment."""
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _tag_service,
        _redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]
    if development:
        chain.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        chain.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])
    return chain


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO") -> None:
    """Wire structlog onto stdlib logging. Safe to call more than once."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # httpx logs every request at INFO; source clients already log outcomes
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(_development_mode()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


# =============================================================================
# Context
# =============================================================================


def bind_context(**fields: Any) -> None:
    """Attach fields to every log line emitted in the current context."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """
    Bind fields for the duration of a with-block.

        with LogContext(source="leetcode"):
            service.ingest(user_id, handle)
    """

    def __init__(self, **fields: Any):
        self.fields = fields

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        structlog.contextvars.reset_contextvars(**self._tokens)
        return False


# =============================================================================
# Timing
# =============================================================================


def log_timing(operation: str, logger: structlog.stdlib.BoundLogger | None = None):
    """
    Log how long each call of the decorated function took.

    Emits operation_complete on return and operation_failed (then re-raises)
    when the call raises.
    """

    def decorator(func: F) -> F:
        timing_logger = logger or get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                timing_logger.error(
                    "operation_failed",
                    operation=operation,
                    duration_seconds=round(time.perf_counter() - started, 3),
                    error=str(e),
                )
                raise
            timing_logger.info(
                "operation_complete",
                operation=operation,
                duration_seconds=round(time.perf_counter() - started, 3),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


# =============================================================================
# ASGI
# =============================================================================


class RequestLoggingMiddleware:
    """Log one request_complete line per HTTP request with status and duration."""

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        path = scope.get("path", "")
        started = time.perf_counter()
        status_code = 500

        async def capture_status(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            if status_code >= 500:
                emit = self.logger.error
            elif status_code >= 400:
                emit = self.logger.warning
            else:
                emit = self.logger.info
            emit(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                duration_seconds=round(time.perf_counter() - started, 3),
            )
            clear_context()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "LogContext",
    "log_timing",
    "RequestLoggingMiddleware",
]
