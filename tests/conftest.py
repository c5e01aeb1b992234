"""Shared fixtures."""

import pytest


def make_graph_event(
    event_id="AAMkAGI2THVSAAA=",
    subject="Team Standup",
    start="2026-01-07T10:00:00.0000000",
    end="2026-01-07T10:30:00.0000000",
    timezone="UTC",
    is_all_day=False,
    location="Conference Room A",
    organizer=("Alice Smith", "alice@example.com"),
    attendees=(),
):
    """Build one calendarView item as Graph returns it."""
    return {
        "id": event_id,
        "subject": subject,
        "isAllDay": is_all_day,
        "start": {"dateTime": start, "timeZone": timezone},
        "end": {"dateTime": end, "timeZone": timezone},
        "location": {"displayName": location},
        "organizer": {"emailAddress": {"name": organizer[0], "address": organizer[1]}},
        "attendees": [
            {"emailAddress": {"name": name, "address": address}, "type": role}
            for name, address, role in attendees
        ],
    }


@pytest.fixture
def graph_event():
    """Factory for Graph wire events."""
    return make_graph_event
