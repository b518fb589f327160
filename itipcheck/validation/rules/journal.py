"""
VJOURNAL presence tables, RFC 2446 section 3.5.

Only PUBLISH, ADD and CANCEL are defined for journals. A journal never
carries nested components, which the component model already enforces.
"""

from itipcheck.validation.models import (
    Cardinality,
    ComponentKind,
    Method,
    PropertyName as P,
)
from itipcheck.validation.rules.base import (
    SEQUENCE_NON_NEGATIVE,
    STATUS_CANCELLED,
    RuleSpecification,
    allowed_values,
    applicable_values,
    cardinalities,
)

JOURNAL_STATUS = allowed_values(P.STATUS, "DRAFT", "FINAL", "CANCELLED")

_RECURRENCE = (P.EXDATE, P.EXRULE, P.RDATE, P.RRULE)

_publish = cardinalities(
    one=(P.DESCRIPTION, P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.UID),
    optional=(
        P.CATEGORIES,
        P.CLASS,
        P.CREATED,
        P.LAST_MODIFIED,
        P.RECURRENCE_ID,
        P.SEQUENCE,
        P.STATUS,
        P.SUMMARY,
        P.URL,
    ),
    unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
    forbidden=(P.ATTENDEE, P.REQUEST_STATUS),
)

JOURNAL_PUBLISH = RuleSpecification(
    kind=ComponentKind.VJOURNAL,
    method=Method.PUBLISH,
    properties=_publish,
    values=applicable_values(_publish, JOURNAL_STATUS, SEQUENCE_NON_NEGATIVE),
    relaxations={P.ORGANIZER: Cardinality.AT_MOST_ONE},
)

_add = cardinalities(
    one=(P.DESCRIPTION, P.DTSTAMP, P.DTSTART, P.ORGANIZER, P.SEQUENCE, P.UID),
    optional=(
        P.CATEGORIES,
        P.CLASS,
        P.CREATED,
        P.LAST_MODIFIED,
        P.STATUS,
        P.SUMMARY,
        P.URL,
    ),
    unconstrained=(P.ATTACH, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
    forbidden=(P.ATTENDEE, P.RECURRENCE_ID, P.REQUEST_STATUS),
)

JOURNAL_ADD = RuleSpecification(
    kind=ComponentKind.VJOURNAL,
    method=Method.ADD,
    properties=_add,
    values=applicable_values(_add, JOURNAL_STATUS, SEQUENCE_NON_NEGATIVE),
)

_cancel = cardinalities(
    one=(P.DTSTAMP, P.ORGANIZER, P.SEQUENCE, P.UID),
    optional=(
        P.CATEGORIES,
        P.CLASS,
        P.CREATED,
        P.DESCRIPTION,
        P.DTSTART,
        P.LAST_MODIFIED,
        P.RECURRENCE_ID,
        P.STATUS,
        P.SUMMARY,
        P.URL,
    ),
    unconstrained=(P.ATTACH, P.ATTENDEE, P.CONTACT, P.RELATED_TO) + _RECURRENCE,
    forbidden=(P.REQUEST_STATUS,),
)

JOURNAL_CANCEL = RuleSpecification(
    kind=ComponentKind.VJOURNAL,
    method=Method.CANCEL,
    properties=_cancel,
    values=applicable_values(_cancel, STATUS_CANCELLED, SEQUENCE_NON_NEGATIVE),
)

JOURNAL_RULES = (JOURNAL_PUBLISH, JOURNAL_ADD, JOURNAL_CANCEL)
