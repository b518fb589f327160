"""
Violation models reported by the validation engine.

Every failed constraint becomes one immutable violation. Violations are
collected into a ``ValidationResult``; nothing here is raised unless the
caller asks for it with ``ValidationResult.raise_for_violations()``.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from itipcheck.common.errors import ErrorCode, ITIPValidationError
from itipcheck.validation.models import Cardinality, ComponentKind, identifier_label

V = TypeVar("V", bound="ValidationViolation")


def _label(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class ValidationViolation(BaseModel):
    """
    Base model for one failed constraint.

    Attributes:
        error_code: Code from the shared ErrorCode registry
        message: Human-readable description, generated when not given
        component_kind: Kind of the component the violation was found in
        component_index: Position of the top-level component in the object
        nested_index: Position of the nested component inside its parent
    """

    model_config = ConfigDict(frozen=True)

    error_code: ErrorCode = ErrorCode.VALIDATION_FAILED
    message: str = ""
    component_kind: Optional[ComponentKind] = None
    component_index: Optional[int] = None
    nested_index: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def default_message(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("message"):
            data = {**data, "message": cls.describe(data)}
        return data

    @classmethod
    def describe(cls, data: Dict[str, Any]) -> str:
        return "validation failed"

    def locate(
        self: V,
        component_kind: Optional[ComponentKind],
        component_index: Optional[int],
        nested_index: Optional[int] = None,
    ) -> V:
        """Copy of this violation tagged with where it was found."""
        return self.model_copy(
            update={
                "component_kind": component_kind,
                "component_index": component_index,
                "nested_index": nested_index,
            }
        )


class CardinalityViolation(ValidationViolation):
    """Wrong number of a property or nested component for its context."""

    error_code: ErrorCode = ErrorCode.CARDINALITY_VIOLATION
    identifier: str
    expected: Cardinality
    actual: int

    @classmethod
    def describe(cls, data: Dict[str, Any]) -> str:
        expected = data.get("expected")
        notation = (
            Cardinality(expected).notation if expected is not None else "unknown"
        )
        return (
            f"{_label(data.get('identifier'))}: expected {notation}, "
            f"found {data.get('actual')}"
        )


class ValueConstraintViolation(ValidationViolation):
    """A property is present but its value is not allowed."""

    error_code: ErrorCode = ErrorCode.VALUE_CONSTRAINT_VIOLATION
    identifier: str
    allowed: str
    actual: str

    @classmethod
    def describe(cls, data: Dict[str, Any]) -> str:
        return (
            f"{_label(data.get('identifier'))}: value {data.get('actual')!r} "
            f"not allowed (allowed: {data.get('allowed')})"
        )


class ConditionalConstraintViolation(ValidationViolation):
    """
    A mutually exclusive pair is present, a dependency is missing, or a
    value-triggered cardinality requirement is not met.
    """

    error_code: ErrorCode = ErrorCode.CONDITIONAL_CONSTRAINT_VIOLATION
    identifier: str
    related: str
    constraint: str

    @classmethod
    def describe(cls, data: Dict[str, Any]) -> str:
        return (
            f"{_label(data.get('identifier'))}/{_label(data.get('related'))}: "
            f"{data.get('constraint')}"
        )


class InconsistentIdentifier(ValidationViolation):
    """A top-level component's UID differs from the first component's."""

    error_code: ErrorCode = ErrorCode.INCONSISTENT_IDENTIFIER
    identifier: str = "UID"
    expected: Optional[str] = None
    found: Optional[str] = None

    @classmethod
    def describe(cls, data: Dict[str, Any]) -> str:
        return (
            f"{data.get('identifier', 'UID')} mismatch at component "
            f"{data.get('component_index')}: expected {data.get('expected')!r}, "
            f"found {data.get('found')!r}"
        )


class UnsupportedMethod(ValidationViolation):
    """No rule specification exists for the (component kind, METHOD) pair."""

    error_code: ErrorCode = ErrorCode.UNSUPPORTED_METHOD
    method: str
    reason: str = ""

    @classmethod
    def describe(cls, data: Dict[str, Any]) -> str:
        kind = data.get("component_kind")
        subject = f"{_label(kind)} " if kind is not None else ""
        reason = data.get("reason") or "no rule specification"
        return f"{subject}METHOD:{data.get('method')} is not supported ({reason})"


class ValidationResult(BaseModel):
    """Outcome of one validation call: every violation found, in order."""

    model_config = ConfigDict(frozen=True)

    method: Optional[str] = None
    violations: Tuple[ValidationViolation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def of_type(self, violation_type: Type[V]) -> Tuple[V, ...]:
        return tuple(v for v in self.violations if isinstance(v, violation_type))

    def for_identifier(self, identifier: Any) -> Tuple[ValidationViolation, ...]:
        """Violations naming ``identifier`` (property name or component kind)."""
        label = identifier_label(identifier)
        return tuple(
            v for v in self.violations if getattr(v, "identifier", None) == label
        )

    def raise_for_violations(self) -> None:
        """Raise ITIPValidationError when any violation was found."""
        if self.violations:
            raise ITIPValidationError(self.violations, method=self.method)
