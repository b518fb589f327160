"""
Cardinality assertion primitives.

Each primitive counts the entries of a collection that match an identifier
(a property name, or a component kind for nested components) and raises
``CardinalityAssertionError`` when the count predicate fails. They hold no
state and accept any iterable, including an empty one.
"""

from typing import Any, Callable, Dict, Iterable

from itipcheck.common.errors import CardinalityAssertionError
from itipcheck.validation.models import (
    CalendarComponent,
    Cardinality,
    Property,
    identifier_label,
)
from itipcheck.validation.violations import CardinalityViolation


def _entry_identifier(entry: Any) -> str:
    if isinstance(entry, Property):
        return entry.name.value
    if isinstance(entry, CalendarComponent):
        return entry.kind.value
    return identifier_label(entry)


def count_matching(identifier: Any, collection: Iterable[Any]) -> int:
    """Number of entries in ``collection`` named ``identifier``."""
    label = identifier_label(identifier)
    return sum(1 for entry in collection if _entry_identifier(entry) == label)


def _fail(identifier: Any, expected: Cardinality, actual: int) -> None:
    raise CardinalityAssertionError(
        CardinalityViolation(
            identifier=identifier_label(identifier),
            expected=expected,
            actual=actual,
        )
    )


def assert_none(identifier: Any, collection: Iterable[Any]) -> None:
    """Fail if any entry matches."""
    actual = count_matching(identifier, collection)
    if actual > 0:
        _fail(identifier, Cardinality.NONE, actual)


def assert_one(identifier: Any, collection: Iterable[Any]) -> None:
    """Fail unless exactly one entry matches."""
    actual = count_matching(identifier, collection)
    if actual != 1:
        _fail(identifier, Cardinality.EXACTLY_ONE, actual)


def assert_one_or_less(identifier: Any, collection: Iterable[Any]) -> None:
    """Fail if more than one entry matches."""
    actual = count_matching(identifier, collection)
    if actual > 1:
        _fail(identifier, Cardinality.AT_MOST_ONE, actual)


def assert_one_or_more(identifier: Any, collection: Iterable[Any]) -> None:
    """Fail if no entry matches."""
    actual = count_matching(identifier, collection)
    if actual == 0:
        _fail(identifier, Cardinality.AT_LEAST_ONE, actual)


def _assert_any(identifier: Any, collection: Iterable[Any]) -> None:
    return None


_ASSERTIONS: Dict[Cardinality, Callable[[Any, Iterable[Any]], None]] = {
    Cardinality.NONE: assert_none,
    Cardinality.EXACTLY_ONE: assert_one,
    Cardinality.AT_MOST_ONE: assert_one_or_less,
    Cardinality.AT_LEAST_ONE: assert_one_or_more,
    Cardinality.ANY: _assert_any,
}


def assert_cardinality(
    cardinality: Cardinality, identifier: Any, collection: Iterable[Any]
) -> None:
    """Run the primitive that enforces ``cardinality``."""
    _ASSERTIONS[Cardinality(cardinality)](identifier, collection)
