"""
Tests for the calendar component models.
"""

import pydantic
import pytest

from itipcheck.validation.models import (
    CalendarComponent,
    CalendarObject,
    Cardinality,
    ComponentKind,
    Method,
    Property,
    PropertyName,
    identifier_label,
)
from itipcheck.validation.tests.helpers.component_builders import component, prop


class TestMethod:
    """Test METHOD parsing."""

    def test_parse_is_case_insensitive(self):
        """Test that whitespace and case are ignored."""
        assert Method.parse(" reply ") is Method.REPLY
        assert Method.parse("DeclineCounter") is Method.DECLINECOUNTER
        assert Method.parse(Method.ADD) is Method.ADD

    def test_parse_unknown(self):
        """Test that unknown verbs raise ValueError."""
        with pytest.raises(ValueError):
            Method.parse("POLL")


class TestCardinality:
    """Test cardinality notation."""

    def test_notation(self):
        """Test the RFC table notation for each cardinality."""
        assert Cardinality.NONE.notation == "0"
        assert Cardinality.EXACTLY_ONE.notation == "1"
        assert Cardinality.AT_MOST_ONE.notation == "0 or 1"
        assert Cardinality.AT_LEAST_ONE.notation == "1+"
        assert Cardinality.ANY.notation == "0+"


class TestProperty:
    """Test the property model."""

    def test_name_is_normalized(self):
        """Test that names are upper-cased into the vocabulary."""
        assert Property(name=" last-modified ").name is PropertyName.LAST_MODIFIED

    def test_unknown_name_rejected(self):
        """Test that names outside the vocabulary fail validation."""
        with pytest.raises(pydantic.ValidationError):
            Property(name="X-WR-CALNAME", value="Team")

    def test_frozen(self):
        """Test that properties cannot be changed after construction."""
        p = prop("STATUS", "CONFIRMED")
        with pytest.raises(pydantic.ValidationError):
            p.value = "CANCELLED"

    def test_text(self):
        """Test the normalized token form of a value."""
        assert prop("STATUS", " cancelled ").text == "CANCELLED"
        assert prop("SEQUENCE", 3).text == "3"

    def test_parameters(self):
        """Test that parameters are kept as given."""
        p = prop("ATTENDEE", "mailto:a@example.com", PARTSTAT="ACCEPTED")
        assert p.parameters == {"PARTSTAT": "ACCEPTED"}

    def test_parameters_read_only(self):
        """Test that parameters cannot be changed through the snapshot."""
        params = {"PARTSTAT": "ACCEPTED"}
        p = Property(name="ATTENDEE", value="mailto:a@example.com", parameters=params)

        with pytest.raises(TypeError):
            p.parameters["PARTSTAT"] = "DECLINED"

        params["PARTSTAT"] = "DECLINED"
        assert p.parameters["PARTSTAT"] == "ACCEPTED"
        assert p.model_dump()["parameters"] == {"PARTSTAT": "ACCEPTED"}

    def test_hashable(self):
        """Test that properties and components can be hashed."""
        p = prop("UID", "x")
        same = prop("UID", "x")
        with_params = prop("ATTENDEE", ["unhashable"], CN="Alice")

        assert hash(p) == hash(same)
        assert len({p, same, with_params}) == 2
        assert hash(component(ComponentKind.VEVENT, p, with_params)) is not None


class TestCalendarComponent:
    """Test component queries and nesting rules."""

    def test_queries(self):
        """Test property and component lookups."""
        alarm = component(ComponentKind.VALARM, prop("ACTION", "DISPLAY"))
        event = component(
            ComponentKind.VEVENT,
            prop("ATTENDEE", "mailto:a@example.com"),
            prop("ATTENDEE", "mailto:b@example.com"),
            prop("UID", "abc"),
            components=[alarm],
        )

        assert len(event.get_properties("ATTENDEE")) == 2
        first = event.get_property(PropertyName.ATTENDEE)
        assert first.value == "mailto:a@example.com"
        assert event.get_property("SUMMARY") is None
        assert event.get_components(ComponentKind.VALARM) == (alarm,)
        assert event.uid == "abc"

    def test_uid_missing(self):
        """Test that a component without UID reports None."""
        assert component(ComponentKind.VTODO).uid is None

    @pytest.mark.parametrize("parent", [ComponentKind.VEVENT, ComponentKind.VTODO])
    def test_alarm_nesting_allowed(self, parent):
        """Test that alarms nest inside events and to-dos."""
        nested = component(parent, components=[component(ComponentKind.VALARM)])
        assert len(nested.components) == 1

    @pytest.mark.parametrize(
        "parent,child",
        [
            (ComponentKind.VJOURNAL, ComponentKind.VALARM),
            (ComponentKind.VFREEBUSY, ComponentKind.VALARM),
            (ComponentKind.VEVENT, ComponentKind.VTODO),
            (ComponentKind.VALARM, ComponentKind.VALARM),
        ],
    )
    def test_illegal_nesting_rejected(self, parent, child):
        """Test that other nestings fail model validation."""
        with pytest.raises(pydantic.ValidationError, match="cannot be nested"):
            CalendarComponent(kind=parent, components=(component(child),))


class TestCalendarObject:
    """Test the calendar object model."""

    def test_method(self):
        """Test that METHOD is read only when it appears exactly once."""
        single = CalendarObject(properties=(prop("METHOD", "REPLY"),))
        assert single.method == "REPLY"

        assert CalendarObject().method is None

        double = CalendarObject(
            properties=(prop("METHOD", "REPLY"), prop("METHOD", "CANCEL"))
        )
        assert double.method is None


def test_identifier_label():
    """Test identifier normalization for enums and strings."""
    assert identifier_label(PropertyName.REQUEST_STATUS) == "REQUEST-STATUS"
    assert identifier_label(ComponentKind.VALARM) == "VALARM"
    assert identifier_label(" uid ") == "UID"
