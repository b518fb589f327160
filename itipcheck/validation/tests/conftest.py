"""
Shared fixtures for validation tests.
"""

import pytest

from itipcheck.common.settings import reset_settings
from itipcheck.validation.models import CalendarComponent, ComponentKind
from itipcheck.validation.tests.helpers.component_builders import component, prop


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Pin engine settings so a developer's environment cannot leak in."""
    monkeypatch.setenv("ITIP_FAIL_FAST", "false")
    monkeypatch.setenv("ITIP_RELAXED_VALIDATION", "false")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def reply_event() -> CalendarComponent:
    """A minimal valid VEVENT for METHOD:REPLY."""
    return component(
        ComponentKind.VEVENT,
        prop("ATTENDEE", "mailto:bob@example.com", PARTSTAT="ACCEPTED"),
        prop("DTSTAMP", "20240101T120000Z"),
        prop("ORGANIZER", "mailto:alice@example.com"),
        prop("UID", "meeting-42@example.com"),
    )
