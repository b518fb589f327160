"""
VEVENT presence tables, RFC 2446 section 3.2.
"""

from typing import Dict, Mapping, Tuple

from itipcheck.validation.models import (
    Cardinality,
    ComponentKind,
    Method,
    PropertyName as P,
)
from itipcheck.validation.rules.base import (
    PRIORITY_RANGE,
    SEQUENCE_NON_NEGATIVE,
    STATUS_CANCELLED,
    TRANSP_VALUES,
    AllowedValues,
    ConditionalConstraint,
    MutuallyExclusive,
    RuleSpecification,
    allowed_values,
    applicable_values,
    cardinalities,
)

EVENT_STATUS = allowed_values(P.STATUS, "TENTATIVE", "CONFIRMED", "CANCELLED")

# Descriptive properties most methods allow at most once
_DESCRIPTIVE = (
    P.CATEGORIES,
    P.CLASS,
    P.CREATED,
    P.DESCRIPTION,
    P.DTEND,
    P.DURATION,
    P.GEO,
    P.LAST_MODIFIED,
    P.LOCATION,
    P.PRIORITY,
    P.RESOURCES,
    P.STATUS,
    P.TRANSP,
    P.URL,
)

_RECURRENCE = (P.EXDATE, P.EXRULE, P.RDATE, P.RRULE)


def _event(
    method: Method,
    properties: Mapping[P, Cardinality],
    alarms: Cardinality,
    status: AllowedValues = EVENT_STATUS,
) -> RuleSpecification:
    conditions: Tuple[ConditionalConstraint, ...] = ()
    if all(
        properties.get(name, Cardinality.ANY) is not Cardinality.NONE
        for name in (P.DTEND, P.DURATION)
    ):
        conditions = (MutuallyExclusive(P.DTEND, P.DURATION),)

    relaxations: Dict[P, Cardinality] = {}
    if method is Method.PUBLISH:
        relaxations[P.ORGANIZER] = Cardinality.AT_MOST_ONE

    return RuleSpecification(
        kind=ComponentKind.VEVENT,
        method=method,
        properties=properties,
        components={ComponentKind.VALARM: alarms},
        conditions=conditions,
        values=applicable_values(
            properties, status, SEQUENCE_NON_NEGATIVE, PRIORITY_RANGE, TRANSP_VALUES
        ),
        relaxations=relaxations,
    )


EVENT_PUBLISH = _event(
    Method.PUBLISH,
    cardinalities(
        one=(P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.SUMMARY, P.UID),
        optional=(P.RECURRENCE_ID, P.SEQUENCE) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.ATTENDEE, P.REQUEST_STATUS),
    ),
    alarms=Cardinality.ANY,
)

EVENT_REQUEST = _event(
    Method.REQUEST,
    cardinalities(
        one_or_more=(P.ATTENDEE,),
        one=(P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.SUMMARY, P.UID),
        optional=(P.SEQUENCE, P.RECURRENCE_ID) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.REQUEST_STATUS,),
    ),
    alarms=Cardinality.ANY,
)

EVENT_REPLY = _event(
    Method.REPLY,
    cardinalities(
        one=(P.ATTENDEE, P.DTSTAMP, P.ORGANIZER, P.UID),
        optional=(P.RECURRENCE_ID, P.SEQUENCE, P.DTSTART, P.SUMMARY) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO, P.REQUEST_STATUS)
        + _RECURRENCE,
    ),
    alarms=Cardinality.NONE,
)

EVENT_ADD = _event(
    Method.ADD,
    cardinalities(
        one=(P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.SEQUENCE, P.SUMMARY, P.UID),
        optional=_DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.ATTENDEE, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.RECURRENCE_ID, P.REQUEST_STATUS),
    ),
    alarms=Cardinality.ANY,
)

EVENT_CANCEL = _event(
    Method.CANCEL,
    cardinalities(
        one=(P.DTSTAMP, P.ORGANIZER, P.SEQUENCE, P.UID),
        optional=(P.DTSTART, P.RECURRENCE_ID, P.SUMMARY) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.ATTENDEE, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
        forbidden=(P.REQUEST_STATUS,),
    ),
    alarms=Cardinality.NONE,
    status=STATUS_CANCELLED,
)

EVENT_REFRESH = _event(
    Method.REFRESH,
    cardinalities(
        one=(P.ATTENDEE, P.DTSTAMP, P.ORGANIZER, P.UID),
        optional=(P.RECURRENCE_ID,),
        forbidden=(
            P.ATTACH,
            P.CONTACT,
            P.DTSTART,
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

EVENT_COUNTER = _event(
    Method.COUNTER,
    cardinalities(
        one=(P.DTSTAMP, P.DTSTART, P.SEQUENCE, P.SUMMARY, P.UID),
        one_or_more=(P.ATTENDEE,),
        optional=(P.ORGANIZER, P.RECURRENCE_ID) + _DESCRIPTIVE,
        unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO, P.REQUEST_STATUS)
        + _RECURRENCE,
    ),
    alarms=Cardinality.ANY,
)

EVENT_DECLINECOUNTER = _event(
    Method.DECLINECOUNTER,
    cardinalities(
        one=(P.DTSTAMP, P.ORGANIZER, P.UID),
        optional=(P.RECURRENCE_ID, P.SEQUENCE),
        unconstrained=(P.REQUEST_STATUS,),
        forbidden=(P.ATTACH, P.ATTENDEE, P.CONTACT, P.DTSTART, P.RELATED_TO, P.SUMMARY)
        + _DESCRIPTIVE
        + _RECURRENCE,
    ),
    alarms=Cardinality.NONE,
)

EVENT_RULES = (
    EVENT_PUBLISH,
    EVENT_REQUEST,
    EVENT_REPLY,
    EVENT_ADD,
    EVENT_CANCEL,
    EVENT_REFRESH,
    EVENT_COUNTER,
    EVENT_DECLINECOUNTER,
)
