"""
VALARM presence tables.

Alarms only appear nested inside VEVENT or VTODO, and RFC 2446 only lets
them travel with PUBLISH, REQUEST, ADD and COUNTER. The four tables are
identical; what an alarm must carry depends on its ACTION.
"""

from itipcheck.validation.models import (
    Cardinality,
    ComponentKind,
    Method,
    PropertyName as P,
)
from itipcheck.validation.rules.base import (
    IntegerRange,
    RequiresPresence,
    RuleSpecification,
    allowed_values,
    cardinalities,
    when_value,
)

ALARM_METHODS = (Method.PUBLISH, Method.REQUEST, Method.ADD, Method.COUNTER)

ALARM_PROPERTIES = cardinalities(
    one=(P.ACTION, P.TRIGGER),
    optional=(P.DESCRIPTION, P.DURATION, P.REPEAT, P.SUMMARY),
    unconstrained=(P.ATTACH, P.ATTENDEE),
)

ALARM_CONDITIONS = (
    RequiresPresence(P.DURATION, P.REPEAT),
    RequiresPresence(P.REPEAT, P.DURATION),
    when_value(P.ACTION, "AUDIO", ATTACH=Cardinality.AT_MOST_ONE),
    when_value(P.ACTION, "DISPLAY", DESCRIPTION=Cardinality.EXACTLY_ONE),
    when_value(
        P.ACTION,
        "EMAIL",
        DESCRIPTION=Cardinality.EXACTLY_ONE,
        SUMMARY=Cardinality.EXACTLY_ONE,
        ATTENDEE=Cardinality.AT_LEAST_ONE,
    ),
    when_value(P.ACTION, "PROCEDURE", ATTACH=Cardinality.EXACTLY_ONE),
)

ALARM_VALUES = (
    allowed_values(P.ACTION, "AUDIO", "DISPLAY", "EMAIL", "PROCEDURE"),
    IntegerRange(P.REPEAT, minimum=0),
)

ALARM_RULES = tuple(
    RuleSpecification(
        kind=ComponentKind.VALARM,
        method=method,
        properties=ALARM_PROPERTIES,
        conditions=ALARM_CONDITIONS,
        values=ALARM_VALUES,
    )
    for method in ALARM_METHODS
)
