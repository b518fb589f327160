"""
Conversion from the ``icalendar`` library's parsed objects.

Callers that already parse iCalendar text with ``icalendar`` hand the
resulting ``Calendar`` (or a single component) to these helpers and get
frozen models the validator understands. Nothing is parsed from text here.

Properties outside the validated vocabulary (X- and IANA extensions) and
nested components other than VALARM are dropped, with a debug log entry.
"""

from typing import Any, Dict, List, Tuple

from icalendar.cal import Calendar, Component

from itipcheck.common.logging_config import get_logger
from itipcheck.validation.models import (
    NESTABLE_KINDS,
    CalendarComponent,
    CalendarObject,
    ComponentKind,
    Property,
    PropertyName,
)

logger = get_logger(__name__)

_PROPERTY_NAMES = {name.value for name in PropertyName}
_COMPONENT_KINDS = {kind.value for kind in ComponentKind}


def _plain_value(value: Any) -> Any:
    # Date and duration wrappers carry the Python value in ``dt``
    if hasattr(value, "dt"):
        return value.dt
    return value


def _convert_properties(component: Component) -> Tuple[Property, ...]:
    properties: List[Property] = []
    for name, value in component.items():
        name = str(name).upper()
        if name not in _PROPERTY_NAMES:
            logger.debug(
                "Skipping property outside the vocabulary",
                component=component.name,
                property=name,
            )
            continue

        # Repeated content lines arrive as one list under a single key
        values = value if isinstance(value, list) else [value]
        for item in values:
            params: Dict[str, Any] = dict(getattr(item, "params", None) or {})
            properties.append(
                Property(name=name, value=_plain_value(item), parameters=params)
            )
    return tuple(properties)


def from_icalendar_component(component: Component) -> CalendarComponent:
    """
    Convert one ``icalendar`` component, and its nested alarms.

    Raises:
        ValueError: If the component kind is not one the validator handles
    """
    name = str(component.name).upper()
    if name not in _COMPONENT_KINDS:
        raise ValueError(f"Unsupported component kind: {name}")
    kind = ComponentKind(name)

    allowed = NESTABLE_KINDS.get(kind, frozenset())
    children: List[CalendarComponent] = []
    for sub in component.subcomponents:
        sub_name = str(sub.name).upper()
        if sub_name not in {k.value for k in allowed}:
            logger.debug(
                "Skipping nested component",
                component=name,
                nested=sub_name,
            )
            continue
        children.append(from_icalendar_component(sub))

    return CalendarComponent(
        kind=kind,
        properties=_convert_properties(component),
        components=tuple(children),
    )


def from_icalendar_calendar(calendar: Calendar) -> CalendarObject:
    """
    Convert a parsed ``icalendar.Calendar``.

    Top-level components of unsupported kinds (VTIMEZONE, VAVAILABILITY)
    are dropped; they carry no iTIP presence rules.
    """
    components: List[CalendarComponent] = []
    for sub in calendar.subcomponents:
        if str(sub.name).upper() not in _COMPONENT_KINDS:
            logger.debug("Skipping top-level component", component=sub.name)
            continue
        components.append(from_icalendar_component(sub))

    return CalendarObject(
        properties=_convert_properties(calendar),
        components=tuple(components),
    )
