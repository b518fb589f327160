"""
Per-component rule evaluation.

``iter_component_violations`` runs one rule specification against one
component in four passes:

1. Cardinality of every listed property and nested component kind
2. Conditional constraints (mutual exclusion, dependencies, value-triggered
   requirements), each independent of the cardinality outcome
3. Value constraints, only for properties whose cardinality passed
4. Nested components, each against the table for (child kind, METHOD)

Violations are yielded lazily so that callers can stop at the first one.
"""

from typing import Iterator, List, Optional, Set

from itipcheck.common.errors import CardinalityAssertionError
from itipcheck.common.logging_config import get_logger
from itipcheck.validation.assertions import assert_cardinality
from itipcheck.validation.models import CalendarComponent, Cardinality, PropertyName
from itipcheck.validation.rules import RuleSpecification, lookup_rule
from itipcheck.validation.violations import UnsupportedMethod, ValidationViolation

logger = get_logger(__name__)


def iter_component_violations(
    component: CalendarComponent,
    spec: RuleSpecification,
    *,
    component_index: Optional[int] = None,
    nested_index: Optional[int] = None,
    relaxed: bool = False,
) -> Iterator[ValidationViolation]:
    """Yield every violation of ``spec`` found in ``component``."""
    logger.debug(
        "Validating component",
        kind=component.kind.value,
        component_index=component_index,
        nested_index=nested_index,
        property_count=len(component.properties),
    )

    def located(violation: ValidationViolation) -> ValidationViolation:
        return violation.locate(component.kind, component_index, nested_index)

    failed: Set[PropertyName] = set()
    for name, cardinality in spec.properties.items():
        try:
            assert_cardinality(cardinality, name, component.properties)
        except CardinalityAssertionError as e:
            failed.add(name)
            yield located(e.violation)

    for kind, cardinality in spec.components.items():
        try:
            assert_cardinality(cardinality, kind, component.components)
        except CardinalityAssertionError as e:
            yield located(e.violation)

    for condition in spec.conditions:
        for violation in condition.check(component):
            yield located(violation)

    for constraint in spec.values:
        if constraint.name in failed:
            continue
        for prop in component.get_properties(constraint.name):
            violation = constraint.check(prop)
            if violation is not None:
                yield located(violation)

    for position, child in enumerate(component.components):
        # Forbidden children were already reported by the cardinality pass
        if spec.component_cardinality(child.kind) is Cardinality.NONE:
            continue

        child_spec = lookup_rule(child.kind, spec.method, relaxed=relaxed)
        if child_spec is None:
            yield UnsupportedMethod(
                method=spec.method.value,
                reason=f"no {child.kind.value} table for METHOD:{spec.method.value}",
                component_kind=child.kind,
                component_index=component_index,
                nested_index=position,
            )
            continue

        yield from iter_component_violations(
            child,
            child_spec,
            component_index=component_index,
            nested_index=position,
            relaxed=relaxed,
        )


def check_component(
    component: CalendarComponent,
    spec: RuleSpecification,
    relaxed: bool = False,
) -> List[ValidationViolation]:
    """All violations of ``spec`` in a single component."""
    return list(iter_component_violations(component, spec, relaxed=relaxed))
