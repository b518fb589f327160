"""
Shared error codes and exception classes for itipcheck.

Provides:
- ErrorCode registry used by both violations and exceptions
- Shared error response model
- Base exception class and its validation subclasses
- Utility to convert exceptions to error responses

Violations discovered while validating a calendar object are *reported*
(see ``itipcheck.validation.violations``), not raised. The exceptions here
are raised by the assertion primitives, which the engine catches and turns
into violations, and by ``ValidationResult.raise_for_violations()`` for
callers that prefer exceptions.

Basic Exception Usage:
>>> from itipcheck.common.errors import ITIPValidationError
>>>
>>> result = validate("REPLY", components)
>>> try:
...     result.raise_for_violations()
... except ITIPValidationError as e:
...     response = e.to_error_response()

Error Code Taxonomy:
===================
- CARDINALITY_* : wrong number of a property or nested component
- VALUE_* : property present but its value is not allowed
- CONDITIONAL_* : mutually exclusive pair present, or a dependency missing
- INCONSISTENT_* : top-level components disagree on a shared identifier
- UNSUPPORTED_* : no rule table for the (component kind, METHOD) pair
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

from pydantic import BaseModel

if TYPE_CHECKING:
    from itipcheck.validation.violations import (
        CardinalityViolation,
        ValidationViolation,
    )


class ErrorCode(str, Enum):
    """
    Error codes for every failure itipcheck can report.

    Codes follow the ALL_CAPS naming convention and are shared by the
    violation models and the exception classes, so a violation and the
    exception wrapping it always agree on the code.
    """

    # ==========================================
    # STRUCTURAL VIOLATIONS
    # ==========================================
    CARDINALITY_VIOLATION = "CARDINALITY_VIOLATION"  # Wrong count of an entry
    VALUE_CONSTRAINT_VIOLATION = "VALUE_CONSTRAINT_VIOLATION"  # Disallowed value
    CONDITIONAL_CONSTRAINT_VIOLATION = (
        "CONDITIONAL_CONSTRAINT_VIOLATION"  # Exclusive pair or missing dependency
    )

    # ==========================================
    # CROSS-COMPONENT VIOLATIONS
    # ==========================================
    INCONSISTENT_IDENTIFIER = "INCONSISTENT_IDENTIFIER"  # UID mismatch

    # ==========================================
    # DISPATCH
    # ==========================================
    UNSUPPORTED_METHOD = "UNSUPPORTED_METHOD"  # No rule table for the pair

    # ==========================================
    # GENERAL
    # ==========================================
    VALIDATION_FAILED = "VALIDATION_FAILED"  # One or more violations found
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """
    Serializable form of an itipcheck error.

    Attributes:
        type: Error type categorization (e.g., "validation_error")
        message: Human-readable error message
        details: Optional dictionary containing additional error context
        timestamp: ISO 8601 timestamp of when the error occurred
        error_id: Unique identifier for correlating the error with log entries
    """

    type: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: str
    error_id: str


class ITIPError(Exception):
    """
    Base exception class for all itipcheck errors.

    Attributes:
        message: Human-readable error message
        details: Dictionary containing additional error context
        error_type: Categorization of the error (validation_error, etc.)
        error_code: Specific error code from the ErrorCode enum
        timestamp: ISO 8601 timestamp when error occurred
        error_id: Unique identifier for tracing
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_type: str = "internal_error",
        error_code: Optional[ErrorCode] = None,
        error_id: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        self.error_type = error_type
        self.error_code = error_code
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = error_id or str(uuid.uuid4())
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """
        Convert exception to an ErrorResponse model.

        The error code, when present, is folded into ``details["code"]``.
        """
        details = {
            **self.details,
            **({"code": self.error_code.value} if self.error_code else {}),
        }
        return ErrorResponse(
            type=self.error_type,
            message=self.message,
            details=details if details else None,
            timestamp=self.timestamp,
            error_id=self.error_id,
        )


class ValidationError(ITIPError):
    """
    Exception raised when a single structural check fails.

    Args:
        message: Human-readable description of the failure
        identifier: Property name or component kind the check was about
        details: Optional additional context
        error_code: Specific code (defaults to VALIDATION_FAILED)
    """

    def __init__(
        self,
        message: str,
        identifier: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
    ):
        validation_details = details or {}
        if identifier:
            validation_details["identifier"] = identifier
        super().__init__(
            message=message,
            details=validation_details,
            error_type="validation_error",
            error_code=error_code,
        )
        self.identifier = identifier


class CardinalityAssertionError(ValidationError):
    """
    Raised by the assertion primitives when a count predicate fails.

    Carries the ``CardinalityViolation`` describing the failed predicate so
    the engine can report it without re-deriving expected/actual counts.
    """

    def __init__(self, violation: "CardinalityViolation"):
        super().__init__(
            violation.message,
            identifier=violation.identifier,
            details={
                "expected": violation.expected.value,
                "actual": violation.actual,
            },
            error_code=ErrorCode.CARDINALITY_VIOLATION,
        )
        self.violation = violation


class ITIPValidationError(ITIPError):
    """
    Raised by ``ValidationResult.raise_for_violations()``.

    Wraps every violation found in one validation call so that callers who
    prefer exceptions still see the complete picture.
    """

    def __init__(
        self,
        violations: Sequence["ValidationViolation"],
        method: Optional[str] = None,
    ):
        self.violations = tuple(violations)
        self.method = method
        count = len(self.violations)
        subject = f"METHOD:{method}" if method else "calendar object"
        super().__init__(
            message=f"{subject} failed validation with {count} violation(s)",
            details={
                "method": method,
                "violations": [v.model_dump(mode="json") for v in self.violations],
            },
            error_type="validation_error",
            error_code=ErrorCode.VALIDATION_FAILED,
        )


def exception_to_response(exc: Exception) -> ErrorResponse:
    """
    Convert any exception into an ErrorResponse.

    itipcheck errors keep their own type, details and code; anything else is
    reported as an internal error with the exception class name attached.
    """
    if isinstance(exc, ITIPError):
        return exc.to_error_response()

    return ErrorResponse(
        type="internal_error",
        message=str(exc) or exc.__class__.__name__,
        details={
            "exception": exc.__class__.__name__,
            "code": ErrorCode.INTERNAL_ERROR.value,
        },
        timestamp=datetime.now(timezone.utc).isoformat(),
        error_id=str(uuid.uuid4()),
    )
