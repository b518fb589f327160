"""
Adapters from third-party calendar object models.
"""

from itipcheck.validation.adapters.icalendar_adapter import (
    from_icalendar_calendar,
    from_icalendar_component,
)

__all__ = ["from_icalendar_calendar", "from_icalendar_component"]
