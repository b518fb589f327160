"""
Common utilities shared by the itipcheck packages: errors, logging, settings.
"""

from itipcheck.common.errors import (
    CardinalityAssertionError,
    ErrorCode,
    ErrorResponse,
    ITIPError,
    ITIPValidationError,
    ValidationError,
    exception_to_response,
)
from itipcheck.common.logging_config import (
    bind_validation_context,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)
from itipcheck.common.settings import Settings, get_settings, reset_settings

__all__ = [
    "CardinalityAssertionError",
    "ErrorCode",
    "ErrorResponse",
    "ITIPError",
    "ITIPValidationError",
    "ValidationError",
    "exception_to_response",
    "bind_validation_context",
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
    "Settings",
    "get_settings",
    "reset_settings",
]
