"""
Cross-component checks for a transmitted calendar object.

Every top-level component in one iTIP message must carry the same UID. The
check compares each component to the first and reports every mismatch.
"""

from typing import AbstractSet, List, Sequence

from itipcheck.validation.models import CalendarComponent
from itipcheck.validation.violations import InconsistentIdentifier


def check_uid_consistency(
    components: Sequence[CalendarComponent],
    exclude: AbstractSet[int] = frozenset(),
) -> List[InconsistentIdentifier]:
    """
    Return one InconsistentIdentifier per component whose UID differs from
    the first compared component's. A missing UID compares as None; fewer
    than two compared components are trivially consistent.

    Args:
        components: Top-level components in message order
        exclude: Indexes left out of the comparison, such as components
            already reported as unsupported
    """
    compared = [
        (index, component)
        for index, component in enumerate(components)
        if index not in exclude
    ]
    if len(compared) < 2:
        return []

    expected = compared[0][1].uid
    return [
        InconsistentIdentifier(
            expected=expected,
            found=component.uid,
            component_kind=component.kind,
            component_index=index,
        )
        for index, component in compared[1:]
        if component.uid != expected
    ]
