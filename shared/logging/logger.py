"""
Structured Logging
==================

structlog setup shared by the API service and the maintenance scripts.

Every entry carries the service name, a UTC timestamp and whatever the
current request has bound (request id, path). Personal data such as DBS
certificate numbers is masked before any renderer sees it. Production
renders one JSON object per line; elsewhere entries go to a readable
console with rich tracebacks.

Version: 0.1.0
"""

import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


REDACTED = "***REDACTED***"

# Any key containing one of these fragments is masked
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "authorization",
        "dbs_certificate_number",
    }
)

# Libraries whose INFO output drowns out our own events
QUIET_LOGGERS = ("asyncio", "asyncpg", "httpcore", "httpx", "redis", "sqlalchemy.engine")


def _is_sensitive(key: str) -> bool:
    key = key.lower()
    return any(fragment in key for fragment in SENSITIVE_KEYS)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(str(k)) else _redact(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return type(value)(_redact(v) for v in value)
    return value


def _censor_secrets(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask sensitive keys at any depth, including inside lists of records."""
    return _redact(event_dict)


def _service_context(service_name: str) -> Callable[..., EventDict]:
    """Processor naming the emitting service, unless the caller already did."""

    def add_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=10),
    )


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "charity-prep",
) -> None:
    """
    Route stdlib and structlog output through one formatter.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
        service_name: Value of the `service` key on every entry
    """
    level = logging.getLevelName(log_level.upper())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _service_context(service_name),
        _censor_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info if json_logs else structlog.dev.set_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def get_logger(name: str | None = None) -> "BoundLogger":
    """Logger for one module: `logger = get_logger(__name__)`."""
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Attach key/values to every entry logged later in this task.

    The request middleware binds `request_id` and `path` here, so service
    code logs `logger.info("score_calculated", overall=82)` and still gets
    both keys.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything bound with `bind_context`."""
    structlog.contextvars.clear_contextvars()
