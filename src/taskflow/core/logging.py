"""Structured logging: structlog setup and per-request context.

Every log line is one JSON object. Request-scoped fields (request_id, method,
path) live in structlog's contextvars and are merged into each event, so module
loggers can be created once at import time.
"""

import contextvars
import logging
import logging.config
import os

import structlog

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID and expose it to every subsequent log event."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def bind_request_context(request_id: str, **fields) -> None:
    """Start a fresh logging context for one request.

    Drops whatever the previous request on this context left behind.
    """
    structlog.contextvars.clear_contextvars()
    set_request_id(request_id)
    if fields:
        structlog.contextvars.bind_contextvars(**fields)


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _renderer(fmt: str | None):
    # "console" is for local development; anything else emits JSON
    if (fmt or os.getenv("LOG_FORMAT", "json")).lower() == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog and route stdlib loggers through the same renderer.

    Args:
        level: Minimum level name; LOG_LEVEL env var, default INFO
        fmt: "json" or "console"; LOG_FORMAT env var, default json
    """
    min_level = _resolve_level(level)
    renderer = _renderer(fmt)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn, sqlalchemy and alembic log through stdlib
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                    "foreign_pre_chain": [
                        structlog.contextvars.merge_contextvars,
                        structlog.processors.TimeStamper(fmt="iso"),
                        structlog.stdlib.add_log_level,
                    ],
                },
            },
            "handlers": {
                "stdout": {
                    "level": min_level,
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {"handlers": ["stdout"], "level": min_level},
                "sqlalchemy.engine": {"level": logging.WARNING},
            },
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger for a module."""
    return structlog.get_logger(name)
