"""
Tests for the cardinality assertion primitives.
"""

import pytest

from itipcheck.common.errors import CardinalityAssertionError, ValidationError
from itipcheck.validation.assertions import (
    assert_cardinality,
    assert_none,
    assert_one,
    assert_one_or_less,
    assert_one_or_more,
    count_matching,
)
from itipcheck.validation.models import Cardinality, ComponentKind, PropertyName
from itipcheck.validation.tests.helpers.component_builders import component, prop

ATTENDEES = (
    prop("ATTENDEE", "mailto:a@example.com"),
    prop("ATTENDEE", "mailto:b@example.com"),
)
ONE_UID = (prop("UID", "x"), prop("ATTENDEE", "mailto:a@example.com"))


class TestCountMatching:
    """Test how entries are matched to identifiers."""

    def test_counts_properties_by_name(self):
        """Test counting with enum and string identifiers."""
        assert count_matching(PropertyName.ATTENDEE, ATTENDEES) == 2
        assert count_matching("attendee", ATTENDEES) == 2
        assert count_matching(PropertyName.UID, ATTENDEES) == 0

    def test_counts_components_by_kind(self):
        """Test counting nested components."""
        alarms = (
            component(ComponentKind.VALARM),
            component(ComponentKind.VALARM),
        )
        assert count_matching(ComponentKind.VALARM, alarms) == 2
        assert count_matching(ComponentKind.VEVENT, alarms) == 0

    def test_accepts_generators(self):
        """Test that any iterable works, including one-shot generators."""
        assert count_matching("UID", (p for p in ONE_UID)) == 1


class TestPrimitives:
    """Test each primitive's pass and fail conditions."""

    def test_assert_none(self):
        """Test that assert_none fails on any match."""
        assert_none("UID", ATTENDEES)
        assert_none("UID", [])

        with pytest.raises(CardinalityAssertionError) as exc_info:
            assert_none("ATTENDEE", ATTENDEES)

        violation = exc_info.value.violation
        assert violation.identifier == "ATTENDEE"
        assert violation.expected == Cardinality.NONE
        assert violation.actual == 2

    def test_assert_one(self):
        """Test that assert_one fails on zero and on many."""
        assert_one("UID", ONE_UID)

        with pytest.raises(CardinalityAssertionError) as exc_info:
            assert_one("UID", [])
        assert exc_info.value.violation.actual == 0

        with pytest.raises(CardinalityAssertionError) as exc_info:
            assert_one("ATTENDEE", ATTENDEES)
        assert exc_info.value.violation.actual == 2
        assert exc_info.value.violation.expected == Cardinality.EXACTLY_ONE

    def test_assert_one_or_less(self):
        """Test that zero and one pass, two fail."""
        assert_one_or_less("UID", [])
        assert_one_or_less("UID", ONE_UID)

        with pytest.raises(CardinalityAssertionError) as exc_info:
            assert_one_or_less(PropertyName.ATTENDEE, ATTENDEES)
        assert exc_info.value.violation.expected == Cardinality.AT_MOST_ONE

    def test_assert_one_or_more(self):
        """Test that only an absent identifier fails."""
        assert_one_or_more("ATTENDEE", ATTENDEES)
        assert_one_or_more("UID", ONE_UID)

        with pytest.raises(CardinalityAssertionError) as exc_info:
            assert_one_or_more("ORGANIZER", ONE_UID)
        assert exc_info.value.violation.expected == Cardinality.AT_LEAST_ONE
        assert exc_info.value.violation.actual == 0

    def test_failure_is_a_validation_error(self):
        """Test the exception hierarchy of primitive failures."""
        with pytest.raises(ValidationError) as exc_info:
            assert_one(ComponentKind.VALARM, [])
        assert exc_info.value.identifier == "VALARM"
        assert "VALARM: expected 1, found 0" in str(exc_info.value)


class TestAssertCardinality:
    """Test selection of the primitive for a cardinality."""

    @pytest.mark.parametrize(
        "cardinality,count,fails",
        [
            (Cardinality.NONE, 0, False),
            (Cardinality.NONE, 1, True),
            (Cardinality.EXACTLY_ONE, 0, True),
            (Cardinality.EXACTLY_ONE, 1, False),
            (Cardinality.EXACTLY_ONE, 2, True),
            (Cardinality.AT_MOST_ONE, 0, False),
            (Cardinality.AT_MOST_ONE, 2, True),
            (Cardinality.AT_LEAST_ONE, 0, True),
            (Cardinality.AT_LEAST_ONE, 3, False),
            (Cardinality.ANY, 0, False),
            (Cardinality.ANY, 5, False),
        ],
    )
    def test_dispatch(self, cardinality, count, fails):
        """Test each cardinality against a range of counts."""
        entries = [prop("COMMENT", str(i)) for i in range(count)]
        if fails:
            with pytest.raises(CardinalityAssertionError) as exc_info:
                assert_cardinality(cardinality, "COMMENT", entries)
            assert exc_info.value.violation.expected == cardinality
            assert exc_info.value.violation.actual == count
        else:
            assert_cardinality(cardinality, "COMMENT", entries)

    def test_accepts_string_cardinality(self):
        """Test that the enum value string is accepted."""
        with pytest.raises(CardinalityAssertionError):
            assert_cardinality("EXACTLY_ONE", "UID", [])
