"""
iTIP structural validation: presence tables per (component kind, METHOD),
the engine that applies them and the cross-component UID check.
"""

from itipcheck.validation.consistency import check_uid_consistency
from itipcheck.validation.dispatch import (
    Validator,
    get_validator,
    validate,
    validate_calendar,
)
from itipcheck.validation.models import (
    CalendarComponent,
    CalendarObject,
    Cardinality,
    ComponentKind,
    Method,
    Property,
    PropertyName,
)
from itipcheck.validation.violations import (
    CardinalityViolation,
    ConditionalConstraintViolation,
    InconsistentIdentifier,
    UnsupportedMethod,
    ValidationResult,
    ValidationViolation,
    ValueConstraintViolation,
)

__all__ = [
    "CalendarComponent",
    "CalendarObject",
    "Cardinality",
    "ComponentKind",
    "Method",
    "Property",
    "PropertyName",
    "CardinalityViolation",
    "ConditionalConstraintViolation",
    "InconsistentIdentifier",
    "UnsupportedMethod",
    "ValidationResult",
    "ValidationViolation",
    "ValueConstraintViolation",
    "check_uid_consistency",
    "Validator",
    "get_validator",
    "validate",
    "validate_calendar",
]
