"""
itipcheck validates iCalendar objects against the iTIP (RFC 5546) rules for
their scheduling METHOD.

Usage:
    from itipcheck import validate

    result = validate("REPLY", components)
    result.raise_for_violations()
"""

from itipcheck.common.errors import ITIPError, ITIPValidationError
from itipcheck.validation import (
    CalendarComponent,
    CalendarObject,
    ComponentKind,
    Method,
    Property,
    ValidationResult,
    Validator,
    validate,
    validate_calendar,
)

__version__ = "0.1.0"

__all__ = [
    "ITIPError",
    "ITIPValidationError",
    "CalendarComponent",
    "CalendarObject",
    "ComponentKind",
    "Method",
    "Property",
    "ValidationResult",
    "Validator",
    "validate",
    "validate_calendar",
]
