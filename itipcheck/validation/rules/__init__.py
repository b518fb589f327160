"""
Rule registry keyed by (component kind, METHOD).

Pairs RFC 2446 does not define are absent; ``lookup_rule`` returns None
for them and dispatch reports ``UnsupportedMethod``.
"""

from typing import Dict, FrozenSet, Optional, Tuple

from itipcheck.validation.models import ComponentKind, Method
from itipcheck.validation.rules.alarm import ALARM_RULES
from itipcheck.validation.rules.base import (
    AllowedValues,
    IntegerRange,
    MutuallyExclusive,
    RequiresPresence,
    RuleSpecification,
    WhenValue,
    cardinalities,
)
from itipcheck.validation.rules.event import EVENT_RULES
from itipcheck.validation.rules.freebusy import FREEBUSY_RULES
from itipcheck.validation.rules.journal import JOURNAL_RULES
from itipcheck.validation.rules.todo import TODO_RULES

RuleKey = Tuple[ComponentKind, Method]

# Authoritative (kind, method) -> table mapping
RULES: Dict[RuleKey, RuleSpecification] = {
    (spec.kind, spec.method): spec
    for spec in EVENT_RULES + TODO_RULES + JOURNAL_RULES + FREEBUSY_RULES + ALARM_RULES
}

# Same tables with compatibility relaxations applied
RELAXED_RULES: Dict[RuleKey, RuleSpecification] = {
    key: spec.relaxed() for key, spec in RULES.items()
}


def lookup_rule(
    kind: ComponentKind, method: Method, relaxed: bool = False
) -> Optional[RuleSpecification]:
    registry = RELAXED_RULES if relaxed else RULES
    return registry.get((ComponentKind(kind), Method(method)))


def supported_methods(kind: ComponentKind) -> FrozenSet[Method]:
    """Methods with a table for ``kind``."""
    return frozenset(m for (k, m) in RULES if k == ComponentKind(kind))


__all__ = [
    "RULES",
    "RELAXED_RULES",
    "RuleKey",
    "RuleSpecification",
    "MutuallyExclusive",
    "RequiresPresence",
    "WhenValue",
    "AllowedValues",
    "IntegerRange",
    "cardinalities",
    "lookup_rule",
    "supported_methods",
]
