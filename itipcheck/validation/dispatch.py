"""
Validator dispatch.

Selects the rule specification for each top-level component from its kind
and the message METHOD, runs the engine, then the cross-component UID check.
"""

from itertools import islice
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Union

from itipcheck.common.errors import CardinalityAssertionError
from itipcheck.common.logging_config import bind_validation_context, get_logger
from itipcheck.common.settings import Settings, get_settings
from itipcheck.validation.assertions import assert_one
from itipcheck.validation.consistency import check_uid_consistency
from itipcheck.validation.engine import iter_component_violations
from itipcheck.validation.models import (
    CalendarComponent,
    CalendarObject,
    Cardinality,
    ComponentKind,
    Method,
    PropertyName,
)
from itipcheck.validation.rules import lookup_rule, supported_methods
from itipcheck.validation.violations import (
    CardinalityViolation,
    UnsupportedMethod,
    ValidationResult,
    ValidationViolation,
    ValueConstraintViolation,
)

CALENDAR_PROPERTIES = (PropertyName.METHOD, PropertyName.PRODID, PropertyName.VERSION)
ICALENDAR_VERSION = "2.0"


def _method_label(method: Union[Method, str]) -> str:
    if isinstance(method, Method):
        return method.value
    return str(method).strip().upper()


class Validator:
    """
    Validates iTIP messages against the registered rule tables.

    Settings are read on each call unless given explicitly, so a shared
    instance follows ``reset_settings()``.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self.logger = get_logger(__name__)

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    def validate(
        self,
        method: Union[Method, str],
        components: Iterable[CalendarComponent],
        *,
        fail_fast: Optional[bool] = None,
        relaxed: Optional[bool] = None,
    ) -> ValidationResult:
        """
        Validate the top-level components of one message sent with ``method``.

        Args:
            method: METHOD value, as an enum or case-insensitive string
            components: Top-level components in message order
            fail_fast: Stop at the first violation (default: ITIP_FAIL_FAST)
            relaxed: Apply compatibility relaxations (default: ITIP_RELAXED_VALIDATION)

        Returns:
            ValidationResult with every violation found, or the first one
            in fail-fast mode
        """
        settings = self.settings
        if fail_fast is None:
            fail_fast = settings.ITIP_FAIL_FAST
        if relaxed is None:
            relaxed = settings.ITIP_RELAXED_VALIDATION

        components = tuple(components)
        label = _method_label(method)
        uid = components[0].uid if components else None

        with bind_validation_context(method=label, uid=uid):
            found = self._iter_violations(label, components, relaxed)
            violations = list(islice(found, 1) if fail_fast else found)
            self.logger.info(
                "Validated calendar components",
                component_count=len(components),
                violation_count=len(violations),
                fail_fast=fail_fast,
                relaxed=relaxed,
            )

        return ValidationResult(method=label, violations=tuple(violations))

    def validate_calendar(
        self,
        calendar: CalendarObject,
        *,
        fail_fast: Optional[bool] = None,
        relaxed: Optional[bool] = None,
    ) -> ValidationResult:
        """
        Validate a whole calendar object.

        METHOD, PRODID and VERSION must each appear once at calendar level
        and VERSION must be 2.0. The METHOD value then drives ``validate``;
        without a usable METHOD the components are not validated.
        """
        if fail_fast is None:
            fail_fast = self.settings.ITIP_FAIL_FAST

        violations: List[ValidationViolation] = []
        for name in CALENDAR_PROPERTIES:
            try:
                assert_one(name, calendar.properties)
            except CardinalityAssertionError as e:
                violations.append(e.violation)

        versions = calendar.get_properties(PropertyName.VERSION)
        if len(versions) == 1 and str(versions[0].value).strip() != ICALENDAR_VERSION:
            violations.append(
                ValueConstraintViolation(
                    identifier=PropertyName.VERSION.value,
                    allowed=ICALENDAR_VERSION,
                    actual=str(versions[0].value),
                )
            )

        method = calendar.method
        if method is None:
            self.logger.warning(
                "Calendar has no usable METHOD, components not validated",
                violation_count=len(violations),
            )
            return ValidationResult(
                violations=tuple(violations[:1] if fail_fast else violations)
            )

        if fail_fast and violations:
            return ValidationResult(
                method=_method_label(method), violations=(violations[0],)
            )

        result = self.validate(
            method, calendar.components, fail_fast=fail_fast, relaxed=relaxed
        )
        return ValidationResult(
            method=result.method, violations=tuple(violations) + result.violations
        )

    def _iter_violations(
        self,
        label: str,
        components: Sequence[CalendarComponent],
        relaxed: bool,
    ) -> Iterator[ValidationViolation]:
        try:
            method: Optional[Method] = Method.parse(label)
        except ValueError:
            method = None

        if not components:
            if method is None:
                yield UnsupportedMethod(method=label, reason="unknown METHOD")
            else:
                yield CardinalityViolation(
                    identifier="COMPONENT",
                    expected=Cardinality.AT_LEAST_ONE,
                    actual=0,
                )
            return

        unsupported_indexes: Set[int] = set()
        for index, component in enumerate(components):
            unsupported = self._unsupported(label, method, component, index, relaxed)
            if unsupported is not None:
                unsupported_indexes.add(index)
                yield unsupported
                continue

            spec = lookup_rule(component.kind, method, relaxed=relaxed)
            yield from iter_component_violations(
                component, spec, component_index=index, relaxed=relaxed
            )

        yield from check_uid_consistency(components, exclude=unsupported_indexes)

    def _unsupported(
        self,
        label: str,
        method: Optional[Method],
        component: CalendarComponent,
        index: int,
        relaxed: bool,
    ) -> Optional[UnsupportedMethod]:
        location = {"component_kind": component.kind, "component_index": index}
        if method is None:
            return UnsupportedMethod(method=label, reason="unknown METHOD", **location)
        if component.kind is ComponentKind.VALARM:
            return UnsupportedMethod(
                method=label,
                reason="VALARM is only valid nested in VEVENT or VTODO",
                **location,
            )
        if lookup_rule(component.kind, method, relaxed=relaxed) is None:
            allowed = ", ".join(
                sorted(m.value for m in supported_methods(component.kind))
            )
            self.logger.debug(
                "No rule table for pair",
                kind=component.kind.value,
                supported=allowed,
            )
            return UnsupportedMethod(
                method=label,
                reason=f"{component.kind.value} supports {allowed}",
                **location,
            )
        return None


_default_validator: Optional[Validator] = None


def get_validator() -> Validator:
    """Get the shared validator instance."""
    global _default_validator
    if _default_validator is None:
        _default_validator = Validator()
    return _default_validator


def validate(
    method: Union[Method, str],
    components: Iterable[CalendarComponent],
    *,
    fail_fast: Optional[bool] = None,
    relaxed: Optional[bool] = None,
) -> ValidationResult:
    return get_validator().validate(
        method, components, fail_fast=fail_fast, relaxed=relaxed
    )


def validate_calendar(
    calendar: CalendarObject,
    *,
    fail_fast: Optional[bool] = None,
    relaxed: Optional[bool] = None,
) -> ValidationResult:
    return get_validator().validate_calendar(
        calendar, fail_fast=fail_fast, relaxed=relaxed
    )
