"""
VTODO presence tables, RFC 2446 section 3.4.
"""

from typing import Dict, List, Mapping

from itipcheck.validation.models import (
    Cardinality,
    ComponentKind,
    Method,
    PropertyName as P,
)
from itipcheck.validation.rules.base import (
    PERCENT_COMPLETE_RANGE,
    PRIORITY_RANGE,
    SEQUENCE_NON_NEGATIVE,
    STATUS_CANCELLED,
    AllowedValues,
    ConditionalConstraint,
    MutuallyExclusive,
    RequiresPresence,
    RuleSpecification,
    allowed_values,
    applicable_values,
    cardinalities,
)

TODO_STATUS = allowed_values(
    P.STATUS, "NEEDS-ACTION", "COMPLETED", "IN-PROCESS", "CANCELLED"
)

_DESCRIPTIVE = (
    P.CATEGORIES,
    P.CLASS,
    P.CREATED,
    P.DESCRIPTION,
    P.DUE,
    P.DURATION,
    P.GEO,
    P.LAST_MODIFIED,
    P.LOCATION,
    P.PERCENT_COMPLETE,
    P.RESOURCES,
    P.STATUS,
    P.URL,
)

_RECURRENCE = (P.EXDATE, P.EXRULE, P.RDATE, P.RRULE)


def _allows(properties: Mapping[P, Cardinality], name: P) -> bool:
    return properties.get(name, Cardinality.ANY) is not Cardinality.NONE


def _todo(
    method: Method,
    properties: Mapping[P, Cardinality],
    alarms: Cardinality,
    status: AllowedValues = TODO_STATUS,
) -> RuleSpecification:
    conditions: List[ConditionalConstraint] = []
    if _allows(properties, P.DUE) and _allows(properties, P.DURATION):
        conditions.append(MutuallyExclusive(P.DUE, P.DURATION))
    if _allows(properties, P.DURATION):
        conditions.append(RequiresPresence(P.DURATION, P.DTSTART))

    relaxations: Dict[P, Cardinality] = {}
    if method is Method.PUBLISH:
        relaxations[P.ORGANIZER] = Cardinality.AT_MOST_ONE

    return RuleSpecification(
        kind=ComponentKind.VTODO,
        method=method,
        properties=properties,
        components={ComponentKind.VALARM: alarms},
        conditions=tuple(conditions),
        values=applicable_values(
            properties,
            status,
            SEQUENCE_NON_NEGATIVE,
            PRIORITY_RANGE,
            PERCENT_COMPLETE_RANGE,
        ),
        relaxations=relaxations,
    )


TODO_PUBLISH = _todo(
    Method.PUBLISH,
    cardinalities(
        one=(P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.PRIORITY, P.SUMMARY, P.UID),
        optional=(P.SEQUENCE, P.RECURRENCE_ID) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.ATTENDEE, P.REQUEST_STATUS),
    ),
    alarms=Cardinality.ANY,
)

TODO_REQUEST = _todo(
    Method.REQUEST,
    cardinalities(
        one_or_more=(P.ATTENDEE,),
        one=(P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.PRIORITY, P.SUMMARY, P.UID),
        optional=(P.SEQUENCE, P.RECURRENCE_ID) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.REQUEST_STATUS,),
    ),
    alarms=Cardinality.ANY,
)

TODO_REPLY = _todo(
    Method.REPLY,
    cardinalities(
        one_or_more=(P.ATTENDEE, P.REQUEST_STATUS),
        one=(P.DTSTAMP, P.ORGANIZER, P.UID),
        optional=(P.DTSTART, P.PRIORITY, P.RECURRENCE_ID, P.SEQUENCE, P.SUMMARY)
        + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
    ),
    alarms=Cardinality.NONE,
)

TODO_ADD = _todo(
    Method.ADD,
    cardinalities(
        one=(P.DTSTAMP, P.ORGANIZER, P.PRIORITY, P.SEQUENCE, P.SUMMARY, P.UID),
        optional=(P.DTSTART,) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.ATTENDEE, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.RECURRENCE_ID, P.REQUEST_STATUS),
    ),
    alarms=Cardinality.ANY,
)

TODO_CANCEL = _todo(
    Method.CANCEL,
    cardinalities(
        one=(P.DTSTAMP, P.ORGANIZER, P.SEQUENCE, P.UID),
        optional=(P.DTSTART, P.PRIORITY, P.RECURRENCE_ID, P.SUMMARY) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.ATTENDEE, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.REQUEST_STATUS,),
    ),
    alarms=Cardinality.NONE,
    status=STATUS_CANCELLED,
)

TODO_REFRESH = _todo(
    Method.REFRESH,
    cardinalities(
        one=(P.ATTENDEE, P.DTSTAMP, P.UID),
        optional=(P.ORGANIZER, P.RECURRENCE_ID),
        forbidden=(
            P.ATTACH,
            P.CONTACT,
            P.DTSTART,
            P.PRIORITY,
            P.RELATED_TO,
            P.REQUEST_STATUS,
            P.SEQUENCE,
            P.SUMMARY,
        )
        + _DESCRIPTIVE
        + _RECURRENCE,
    ),
    alarms=Cardinality.NONE,
)

TODO_COUNTER = _todo(
    Method.COUNTER,
    cardinalities(
        one_or_more=(P.ATTENDEE,),
        one=(P.DTSTAMP, P.ORGANIZER, P.PRIORITY, P.SEQUENCE, P.SUMMARY, P.UID),
        optional=(P.DTSTART, P.RECURRENCE_ID, P.RRULE) + _DESCRIPTIVE,
        unconstrained=(
            P.ATTACH,
            P.CONTACT,
            P.EXDATE,
            P.EXRULE,
            P.RDATE,
            P.RELATED_TO,
            P.REQUEST_STATUS,
        ),
    ),
    alarms=Cardinality.ANY,
)

TODO_DECLINECOUNTER = _todo(
    Method.DECLINECOUNTER,
    cardinalities(
        one_or_more=(P.ATTENDEE,),
        one=(P.DTSTAMP, P.ORGANIZER, P.SEQUENCE, P.UID),
        optional=(P.RECURRENCE_ID,),
        unconstrained=(P.REQUEST_STATUS,),
        forbidden=(P.ATTACH, P.CONTACT, P.DTSTART, P.PRIORITY, P.RELATED_TO, P.SUMMARY)
        + _DESCRIPTIVE
        + _RECURRENCE,
    ),
    alarms=Cardinality.NONE,
)

TODO_RULES = (
    TODO_PUBLISH,
    TODO_REQUEST,
    TODO_REPLY,
    TODO_ADD,
    TODO_CANCEL,
    TODO_REFRESH,
    TODO_COUNTER,
    TODO_DECLINECOUNTER,
)
