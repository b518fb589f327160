"""
Rule specification types.

A ``RuleSpecification`` is the executable form of one RFC 2446/5546 presence
table: a cardinality per property and per nested component kind, plus the
conditional and value constraints the table states in its comment column.
Specifications are frozen once built; the tables in the sibling modules
are module-level constants.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from itipcheck.common.errors import CardinalityAssertionError
from itipcheck.validation.assertions import assert_cardinality
from itipcheck.validation.models import (
    CalendarComponent,
    Cardinality,
    ComponentKind,
    Method,
    Property,
    PropertyName,
)
from itipcheck.validation.violations import (
    ConditionalConstraintViolation,
    ValueConstraintViolation,
)


def cardinalities(
    *,
    one: Iterable[PropertyName] = (),
    optional: Iterable[PropertyName] = (),
    one_or_more: Iterable[PropertyName] = (),
    forbidden: Iterable[PropertyName] = (),
    unconstrained: Iterable[PropertyName] = (),
) -> Mapping[PropertyName, Cardinality]:
    """
    Build a property cardinality mapping from presence groups.

    Raises ValueError when a property is listed in two groups, which would
    make the table ambiguous.
    """
    groups = (
        (Cardinality.EXACTLY_ONE, one),
        (Cardinality.AT_MOST_ONE, optional),
        (Cardinality.AT_LEAST_ONE, one_or_more),
        (Cardinality.NONE, forbidden),
        (Cardinality.ANY, unconstrained),
    )
    table = {}
    for cardinality, names in groups:
        for name in names:
            if name in table:
                raise ValueError(
                    f"{name.value} listed as both {table[name].value} "
                    f"and {cardinality.value}"
                )
            table[name] = cardinality
    return table


@dataclass(frozen=True)
class MutuallyExclusive:
    """``first`` and ``second`` must not both be present."""

    first: PropertyName
    second: PropertyName

    def check(
        self, component: CalendarComponent
    ) -> List[ConditionalConstraintViolation]:
        if component.get_properties(self.first) and component.get_properties(
            self.second
        ):
            return [
                ConditionalConstraintViolation(
                    identifier=self.first.value,
                    related=self.second.value,
                    constraint=(
                        f"{self.first.value} and {self.second.value} "
                        "are mutually exclusive"
                    ),
                )
            ]
        return []


@dataclass(frozen=True)
class RequiresPresence:
    """When ``dependent`` is present, ``prerequisite`` must be present too."""

    dependent: PropertyName
    prerequisite: PropertyName

    def check(
        self, component: CalendarComponent
    ) -> List[ConditionalConstraintViolation]:
        if component.get_properties(self.dependent) and not component.get_properties(
            self.prerequisite
        ):
            return [
                ConditionalConstraintViolation(
                    identifier=self.dependent.value,
                    related=self.prerequisite.value,
                    constraint=(
                        f"{self.dependent.value} requires "
                        f"{self.prerequisite.value}"
                    ),
                )
            ]
        return []


@dataclass(frozen=True)
class WhenValue:
    """
    When property ``trigger`` has ``value``, each listed identifier must meet
    its cardinality (e.g. an EMAIL alarm needs at least one ATTENDEE).
    """

    trigger: PropertyName
    value: str
    requirements: Tuple[Tuple[PropertyName, Cardinality], ...]

    def check(
        self, component: CalendarComponent
    ) -> List[ConditionalConstraintViolation]:
        triggers = component.get_properties(self.trigger)
        if not any(p.text == self.value for p in triggers):
            return []

        violations = []
        for name, cardinality in self.requirements:
            try:
                assert_cardinality(cardinality, name, component.properties)
            except CardinalityAssertionError as e:
                violations.append(
                    ConditionalConstraintViolation(
                        identifier=name.value,
                        related=self.trigger.value,
                        constraint=(
                            f"{self.trigger.value}:{self.value} requires "
                            f"{name.value} {cardinality.notation}, "
                            f"found {e.violation.actual}"
                        ),
                    )
                )
        return violations


ConditionalConstraint = Union[MutuallyExclusive, RequiresPresence, WhenValue]


@dataclass(frozen=True)
class AllowedValues:
    """The property's value must be one of ``allowed`` (case-insensitive)."""

    name: PropertyName
    allowed: FrozenSet[str]

    def describe(self) -> str:
        return ", ".join(sorted(self.allowed))

    def check(self, prop: Property) -> Optional[ValueConstraintViolation]:
        if prop.text in self.allowed:
            return None
        return ValueConstraintViolation(
            identifier=self.name.value,
            allowed=self.describe(),
            actual=str(prop.value),
        )


@dataclass(frozen=True)
class IntegerRange:
    """The property's value must be an integer within [minimum, maximum]."""

    name: PropertyName
    minimum: int
    maximum: Optional[int] = None

    def describe(self) -> str:
        if self.maximum is None:
            return f"integer >= {self.minimum}"
        return f"integer {self.minimum}..{self.maximum}"

    def check(self, prop: Property) -> Optional[ValueConstraintViolation]:
        try:
            number = int(str(prop.value).strip())
        except (TypeError, ValueError):
            number = None

        if number is not None and number >= self.minimum:
            if self.maximum is None or number <= self.maximum:
                return None
        return ValueConstraintViolation(
            identifier=self.name.value,
            allowed=self.describe(),
            actual=str(prop.value),
        )


ValueConstraint = Union[AllowedValues, IntegerRange]


def allowed_values(name: PropertyName, *values: str) -> AllowedValues:
    return AllowedValues(name=name, allowed=frozenset(v.upper() for v in values))


def when_value(
    trigger: PropertyName, value: str, **requirements: Cardinality
) -> WhenValue:
    """``when_value(ACTION, "EMAIL", ATTENDEE=Cardinality.AT_LEAST_ONE)``."""
    return WhenValue(
        trigger=trigger,
        value=value.upper(),
        requirements=tuple(
            (PropertyName(name.replace("_", "-")), cardinality)
            for name, cardinality in requirements.items()
        ),
    )


@dataclass(frozen=True)
class RuleSpecification:
    """
    One (component kind, METHOD) presence table.

    Attributes:
        kind: Component kind the table applies to
        method: METHOD the table applies to
        properties: Cardinality per property; unlisted properties are ANY
        components: Cardinality per nested component kind; unlisted kinds are ANY
        conditions: Mutual exclusion, dependency and value-triggered rules
        values: Value constraints, checked once cardinality has passed
        relaxations: Cardinality overrides applied in relaxed mode
    """

    kind: ComponentKind
    method: Method
    properties: Mapping[PropertyName, Cardinality]
    components: Mapping[ComponentKind, Cardinality] = field(default_factory=dict)
    conditions: Tuple[ConditionalConstraint, ...] = ()
    values: Tuple[ValueConstraint, ...] = ()
    relaxations: Mapping[PropertyName, Cardinality] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only views so a published table cannot be edited in place
        for name in ("properties", "components", "relaxations"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def property_cardinality(self, name: PropertyName) -> Cardinality:
        return self.properties.get(name, Cardinality.ANY)

    def component_cardinality(self, kind: ComponentKind) -> Cardinality:
        return self.components.get(kind, Cardinality.ANY)

    def relaxed(self) -> "RuleSpecification":
        """Copy of this table with its relaxations applied."""
        if not self.relaxations:
            return self
        return replace(
            self,
            properties={**self.properties, **self.relaxations},
            relaxations={},
        )


SEQUENCE_NON_NEGATIVE = IntegerRange(PropertyName.SEQUENCE, minimum=0)
PRIORITY_RANGE = IntegerRange(PropertyName.PRIORITY, minimum=0, maximum=9)
PERCENT_COMPLETE_RANGE = IntegerRange(
    PropertyName.PERCENT_COMPLETE, minimum=0, maximum=100
)
TRANSP_VALUES = allowed_values(PropertyName.TRANSP, "OPAQUE", "TRANSPARENT")
STATUS_CANCELLED = allowed_values(PropertyName.STATUS, "CANCELLED")


def applicable_values(
    properties: Mapping[PropertyName, Cardinality], *constraints: ValueConstraint
) -> Tuple[ValueConstraint, ...]:
    """Keep the constraints whose property the table does not forbid."""
    return tuple(
        c
        for c in constraints
        if properties.get(c.name, Cardinality.ANY) is not Cardinality.NONE
    )
