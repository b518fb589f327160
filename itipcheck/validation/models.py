"""
Calendar component models consumed by the validation engine.

The parsing layer (or ``itipcheck.validation.adapters``) builds these as
frozen snapshots before validation starts. The engine only reads them.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class ComponentKind(str, Enum):
    VEVENT = "VEVENT"
    VTODO = "VTODO"
    VJOURNAL = "VJOURNAL"
    VFREEBUSY = "VFREEBUSY"
    VALARM = "VALARM"


class Method(str, Enum):
    """iTIP scheduling verbs (RFC 5546 section 1.4)."""

    PUBLISH = "PUBLISH"
    REQUEST = "REQUEST"
    REPLY = "REPLY"
    ADD = "ADD"
    CANCEL = "CANCEL"
    REFRESH = "REFRESH"
    COUNTER = "COUNTER"
    DECLINECOUNTER = "DECLINECOUNTER"

    @classmethod
    def parse(cls, value: Union[str, "Method"]) -> "Method":
        """Parse a METHOD value case-insensitively. Raises ValueError."""
        if isinstance(value, Method):
            return value
        return cls(str(value).strip().upper())


class PropertyName(str, Enum):
    ACTION = "ACTION"
    ATTACH = "ATTACH"
    ATTENDEE = "ATTENDEE"
    CATEGORIES = "CATEGORIES"
    CLASS = "CLASS"
    COMMENT = "COMMENT"
    COMPLETED = "COMPLETED"
    CONTACT = "CONTACT"
    CREATED = "CREATED"
    DESCRIPTION = "DESCRIPTION"
    DTEND = "DTEND"
    DTSTAMP = "DTSTAMP"
    DTSTART = "DTSTART"
    DUE = "DUE"
    DURATION = "DURATION"
    EXDATE = "EXDATE"
    EXRULE = "EXRULE"
    FREEBUSY = "FREEBUSY"
    GEO = "GEO"
    LAST_MODIFIED = "LAST-MODIFIED"
    LOCATION = "LOCATION"
    METHOD = "METHOD"
    ORGANIZER = "ORGANIZER"
    PERCENT_COMPLETE = "PERCENT-COMPLETE"
    PRIORITY = "PRIORITY"
    PRODID = "PRODID"
    RDATE = "RDATE"
    RECURRENCE_ID = "RECURRENCE-ID"
    RELATED_TO = "RELATED-TO"
    REPEAT = "REPEAT"
    REQUEST_STATUS = "REQUEST-STATUS"
    RESOURCES = "RESOURCES"
    RRULE = "RRULE"
    SEQUENCE = "SEQUENCE"
    STATUS = "STATUS"
    SUMMARY = "SUMMARY"
    TRANSP = "TRANSP"
    TRIGGER = "TRIGGER"
    UID = "UID"
    URL = "URL"
    VERSION = "VERSION"


class Cardinality(str, Enum):
    """How many instances of a property or nested component are legal."""

    NONE = "NONE"
    EXACTLY_ONE = "EXACTLY_ONE"
    AT_MOST_ONE = "AT_MOST_ONE"
    AT_LEAST_ONE = "AT_LEAST_ONE"
    ANY = "ANY"

    @property
    def notation(self) -> str:
        """The presence notation used by the RFC 5546 tables."""
        return _CARDINALITY_NOTATION[self]


_CARDINALITY_NOTATION = {
    Cardinality.NONE: "0",
    Cardinality.EXACTLY_ONE: "1",
    Cardinality.AT_MOST_ONE: "0 or 1",
    Cardinality.AT_LEAST_ONE: "1+",
    Cardinality.ANY: "0+",
}

# Kinds that may appear nested inside each kind; everything else is top-level only
NESTABLE_KINDS: Dict[ComponentKind, FrozenSet[ComponentKind]] = {
    ComponentKind.VEVENT: frozenset({ComponentKind.VALARM}),
    ComponentKind.VTODO: frozenset({ComponentKind.VALARM}),
}


def identifier_label(identifier: Any) -> str:
    """Plain string for a PropertyName, ComponentKind or raw identifier."""
    if isinstance(identifier, Enum):
        return str(identifier.value)
    return str(identifier).strip().upper()


class Property(BaseModel):
    """One content line: identifier, already-parsed value, parameters."""

    model_config = ConfigDict(frozen=True)

    name: PropertyName
    value: Any = None
    parameters: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Enum):
            return value.strip().upper()
        return value

    @field_validator("parameters", mode="after")
    @classmethod
    def freeze_parameters(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("parameters")
    def serialize_parameters(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    def __hash__(self) -> int:
        # Values may be unhashable, so only the name and parameter keys count
        return hash((self.name, tuple(sorted(self.parameters))))

    @property
    def text(self) -> str:
        """The value as an upper-cased token, for enumerated values."""
        return str(self.value).strip().upper()


class CalendarComponent(BaseModel):
    """
    A calendar component (VEVENT, VTODO, VJOURNAL, VFREEBUSY or VALARM).

    Properties and nested components keep their original order. Only VALARM
    may be nested, and only inside VEVENT or VTODO.
    """

    model_config = ConfigDict(frozen=True)

    kind: ComponentKind
    properties: Tuple[Property, ...] = ()
    components: Tuple["CalendarComponent", ...] = ()

    @model_validator(mode="after")
    def check_nesting(self) -> "CalendarComponent":
        allowed = NESTABLE_KINDS.get(self.kind, frozenset())
        for child in self.components:
            if child.kind not in allowed:
                raise ValueError(
                    f"{child.kind.value} cannot be nested inside {self.kind.value}"
                )
        return self

    def get_properties(self, name: Union[PropertyName, str]) -> Tuple[Property, ...]:
        label = identifier_label(name)
        return tuple(p for p in self.properties if p.name.value == label)

    def get_property(self, name: Union[PropertyName, str]) -> Optional[Property]:
        """First property with ``name``, or None."""
        matches = self.get_properties(name)
        return matches[0] if matches else None

    def get_components(
        self, kind: Union[ComponentKind, str]
    ) -> Tuple["CalendarComponent", ...]:
        label = identifier_label(kind)
        return tuple(c for c in self.components if c.kind.value == label)

    @property
    def uid(self) -> Optional[str]:
        prop = self.get_property(PropertyName.UID)
        if prop is None or prop.value is None:
            return None
        return str(prop.value)


class CalendarObject(BaseModel):
    """A whole transmitted calendar object: calendar properties plus components."""

    model_config = ConfigDict(frozen=True)

    properties: Tuple[Property, ...] = ()
    components: Tuple[CalendarComponent, ...] = ()

    def get_properties(self, name: Union[PropertyName, str]) -> Tuple[Property, ...]:
        label = identifier_label(name)
        return tuple(p for p in self.properties if p.name.value == label)

    @property
    def method(self) -> Optional[str]:
        methods = self.get_properties(PropertyName.METHOD)
        if len(methods) != 1 or methods[0].value is None:
            return None
        return str(methods[0].value)
