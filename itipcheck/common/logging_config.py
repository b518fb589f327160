"""
Centralized logging configuration for itipcheck.

This module provides consistent logging setup including:
- Structured logging with JSON or enhanced text format
- Validation context (METHOD and UID being validated) on every entry

Nothing is configured on import. Applications call ``setup_logging`` (or
``setup_logging_from_settings``) once at startup.

Usage:
    from itipcheck.common.logging_config import setup_logging, get_logger

    # In an application entry point
    setup_logging(log_level="DEBUG", log_format="text")

    logger = get_logger(__name__)
    logger.info("Validated calendar", method="REPLY", violation_count=0)
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, List, Optional

import structlog

# Context variables for validation-specific data
validation_method_var: ContextVar[str] = ContextVar(
    "validation_method", default="unset"
)
calendar_uid_var: ContextVar[str] = ContextVar("calendar_uid", default="unset")


def add_validation_context(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Add the METHOD and UID under validation to all log entries."""
    method = validation_method_var.get()
    uid = calendar_uid_var.get()
    if method and method != "unset":
        event_dict.setdefault("method", method)
    if uid and uid != "unset":
        event_dict.setdefault("uid", uid)
    return event_dict


@contextmanager
def bind_validation_context(
    method: Optional[str] = None, uid: Optional[str] = None
) -> Iterator[None]:
    """
    Bind METHOD and UID to log entries emitted inside the block.

    Context variables are restored on exit, so nested or concurrent
    validations do not leak context into each other.
    """
    method_token = validation_method_var.set(method or "unset")
    uid_token = calendar_uid_var.set(uid or "unset")
    try:
        yield
    finally:
        validation_method_var.reset(method_token)
        calendar_uid_var.reset(uid_token)


class EnhancedTextRenderer:
    """Custom text renderer for readable output during development."""

    def __init__(self, service_name: str):
        self.service_name = service_name

    def __call__(
        self,
        logger: structlog.types.WrappedLogger,
        method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> str:
        """Render log entry as enhanced text format."""
        timestamp = event_dict.get("timestamp", "")
        level = str(event_dict.get("level", "info")).upper()
        logger_name = str(event_dict.get("logger", ""))
        message = event_dict.get("event", "")

        # Drop the package prefix for cleaner output
        if logger_name.startswith("itipcheck."):
            logger_name = logger_name[len("itipcheck.") :]

        context = ""
        method = event_dict.get("method")
        if method:
            context = f"[{method}]"

        parts = [
            timestamp,
            f"[{self.service_name}]",
            f"[{level}]",
            context,
            logger_name,
            f"- {message}",
        ]

        # Add extra context as key=value pairs
        extra_context = []
        for key, value in event_dict.items():
            if key in ("timestamp", "level", "logger", "event", "method"):
                continue
            if isinstance(value, (str, int, float, bool)) or value is None:
                extra_context.append(f"{key}={value}")
            else:
                extra_context.append(f"{key}={str(value)[:150]}...")

        if extra_context:
            parts.append(f"| {', '.join(extra_context)}")

        return " ".join(filter(None, parts))


def _shared_processors() -> List[Any]:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_validation_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    service_name: str = "itipcheck",
) -> None:
    """
    Set up logging for an application that uses itipcheck.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Format type ("json" or "text")
        service_name: Name shown by the text renderer
    """
    processors = _shared_processors()
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(EnhancedTextRenderer(service_name))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # structlog renders the message, stdlib only passes it through
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=[handler],
        force=True,
    )

    logger = get_logger(__name__)
    logger.info(
        f"Logging configured for {service_name}",
        log_level=log_level,
        log_format=log_format,
    )


def setup_logging_from_settings() -> None:
    """Configure logging from ``LOG_LEVEL`` and ``LOG_FORMAT`` settings."""
    from itipcheck.common.settings import get_settings

    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
