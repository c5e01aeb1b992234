"""Microsoft Graph calendar retrieval.

Usage:
    from outlook_md.calendar import GraphCalendarClient

    with GraphCalendarClient(access_token) as client:
        events = client.get_calendar_view(start, end, "America/New_York")
"""

from __future__ import annotations

from outlook_md.calendar.client import GraphCalendarClient
from outlook_md.calendar.events import normalize_events, sort_attendees, sort_events
from outlook_md.calendar.exceptions import (
    CalendarError,
    GraphAPIError,
    ParseError,
    RequestTimeoutError,
    TransportError,
)
from outlook_md.calendar.models import (
    Attendee,
    AttendeeType,
    CalendarEvent,
    CLIOutput,
    Organizer,
    TimeWindow,
)

__all__ = [
    "GraphCalendarClient",
    "normalize_events",
    "sort_attendees",
    "sort_events",
    "Attendee",
    "AttendeeType",
    "CalendarEvent",
    "CLIOutput",
    "Organizer",
    "TimeWindow",
    "CalendarError",
    "GraphAPIError",
    "ParseError",
    "RequestTimeoutError",
    "TransportError",
]
