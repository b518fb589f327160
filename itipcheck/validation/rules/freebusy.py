"""
VFREEBUSY presence tables, RFC 2446 section 3.3.

Only PUBLISH, REQUEST and REPLY are defined for free/busy.
"""

from itipcheck.validation.models import ComponentKind, Method, PropertyName as P
from itipcheck.validation.rules.base import (
    SEQUENCE_NON_NEGATIVE,
    RuleSpecification,
    applicable_values,
    cardinalities,
)

_publish = cardinalities(
    one_or_more=(P.FREEBUSY,),
    one=(P.DTSTAMP, P.DTSTART, P.DTEND, P.ORGANIZER),
    optional=(P.URL,),
    forbidden=(P.ATTENDEE, P.DURATION, P.REQUEST_STATUS, P.UID),
)

FREEBUSY_PUBLISH = RuleSpecification(
    kind=ComponentKind.VFREEBUSY,
    method=Method.PUBLISH,
    properties=_publish,
    values=applicable_values(_publish, SEQUENCE_NON_NEGATIVE),
)

_request = cardinalities(
    one_or_more=(P.ATTENDEE,),
    one=(P.DTEND, P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.UID),
    forbidden=(P.FREEBUSY, P.DURATION, P.REQUEST_STATUS, P.URL),
)

FREEBUSY_REQUEST = RuleSpecification(
    kind=ComponentKind.VFREEBUSY,
    method=Method.REQUEST,
    properties=_request,
    values=applicable_values(_request, SEQUENCE_NON_NEGATIVE),
)

FREEBUSY_REPLY = RuleSpecification(
    kind=ComponentKind.VFREEBUSY,
    method=Method.REPLY,
    properties=cardinalities(
        one=(P.ATTENDEE, P.DTSTAMP, P.DTEND, P.DTSTART, P.ORGANIZER, P.UID),
        optional=(P.URL,),
        unconstrained=(P.FREEBUSY, P.REQUEST_STATUS),
        forbidden=(P.DURATION, P.SEQUENCE),
    ),
)

FREEBUSY_RULES = (FREEBUSY_PUBLISH, FREEBUSY_REQUEST, FREEBUSY_REPLY)
