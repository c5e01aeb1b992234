"""Normalization of Graph calendarView events.

Graph renders wall-clock fields in the zone named by the request's
`Prefer: outlook.timezone` header, usually as a bare local timestamp with a
7-digit fraction ("2026-01-07T10:00:00.0000000"). Offset-qualified values
are accepted too and converted into the target zone.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from outlook_md.calendar.exceptions import ParseError
from outlook_md.calendar.models import Attendee, AttendeeType, CalendarEvent, Organizer
from outlook_md.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_DATETIME_RE = re.compile(
    r"^(?P<local>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})?$"
)


def load_timezone(name: str) -> ZoneInfo:
    """Look up an IANA timezone.

    Raises:
        ConfigurationError: If the name is unknown.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"invalid timezone: {name}") from e


def parse_graph_datetime(value: Any, tz: tzinfo, event_id: str | None = None) -> datetime:
    """Parse a Graph dateTime string into an aware datetime in `tz`.

    Args:
        value: "YYYY-MM-DDTHH:MM:SS[.fff...]" with optional "Z"/"+HH:MM".
        tz: Zone used for bare values and for the result.
        event_id: Included in the error message.

    Raises:
        ParseError: If the value has any other shape.
    """
    match = _DATETIME_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ParseError(f"failed to parse datetime {value!r}", event_id=event_id)

    text = match.group("local")
    fraction = match.group("fraction")
    if fraction:
        # datetime supports microseconds only
        text += "." + fraction[:6].ljust(6, "0")

    offset = match.group("offset")
    if offset:
        text += "+00:00" if offset == "Z" else offset

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ParseError(f"failed to parse datetime {value!r}: {e}", event_id=event_id) from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def attendee_sort_key(attendee: Attendee) -> tuple[int, str, str]:
    """Canonical attendee order: role, then email, then name (case-insensitive)."""
    return (attendee.type.rank, attendee.email.casefold(), attendee.name.casefold())


def sort_attendees(attendees: Iterable[Attendee]) -> list[Attendee]:
    """Return attendees in canonical order. Ties keep their input order."""
    return sorted(attendees, key=attendee_sort_key)


def sort_events(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    """Return events ordered by start instant. Ties keep their input order."""
    return sorted(events, key=lambda event: event.start)


def _field(data: dict[str, Any], key: str, event_id: str | None) -> dict[str, Any]:
    """Nested object at `key`; absent or null becomes {}."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(
            f"expected {key!r} to be an object, got {type(value).__name__}",
            event_id=event_id,
        )
    return value


def _text(data: dict[str, Any], key: str, event_id: str | None) -> str:
    """String at `key`; absent or null becomes ""."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(
            f"expected {key!r} to be a string, got {type(value).__name__}",
            event_id=event_id,
        )
    return value


def _parse_attendee(data: Any, event_id: str) -> Attendee:
    if not isinstance(data, dict):
        raise ParseError(
            f"expected an attendee object, got {type(data).__name__}", event_id=event_id
        )

    address = _field(data, "emailAddress", event_id)
    raw_type = (_text(data, "type", event_id) or AttendeeType.REQUIRED.value).lower()
    try:
        attendee_type = AttendeeType(raw_type)
    except ValueError as e:
        raise ParseError(f"unknown attendee type {raw_type!r}", event_id=event_id) from e

    return Attendee(
        name=_text(address, "name", event_id),
        email=_text(address, "address", event_id),
        type=attendee_type,
    )


def normalize_event(data: dict[str, Any], tz: tzinfo) -> CalendarEvent:
    """Convert one Graph event into a CalendarEvent.

    Raises:
        ParseError: If the event is malformed.
    """
    if not isinstance(data, dict):
        raise ParseError(f"expected an event object, got {type(data).__name__}")

    event_id = data.get("id")
    if not isinstance(event_id, str) or not event_id:
        raise ParseError("event without id")

    start = parse_graph_datetime(_field(data, "start", event_id).get("dateTime"), tz, event_id)
    end = parse_graph_datetime(_field(data, "end", event_id).get("dateTime"), tz, event_id)

    organizer = _field(_field(data, "organizer", event_id), "emailAddress", event_id)

    raw_attendees = data.get("attendees") or []
    if not isinstance(raw_attendees, list):
        raise ParseError(
            f"expected 'attendees' to be a list, got {type(raw_attendees).__name__}",
            event_id=event_id,
        )
    attendees = [_parse_attendee(a, event_id) for a in raw_attendees]

    return CalendarEvent(
        id=event_id,
        subject=_text(data, "subject", event_id),
        is_all_day=bool(data.get("isAllDay", False)),
        start=start,
        end=end,
        location=_text(_field(data, "location", event_id), "displayName", event_id),
        organizer=Organizer(
            name=_text(organizer, "name", event_id),
            email=_text(organizer, "address", event_id),
        ),
        attendees=tuple(sort_attendees(attendees)),
    )


def normalize_events(raw_events: Iterable[dict[str, Any]], timezone: str) -> list[CalendarEvent]:
    """Normalize Graph events and order them chronologically.

    Args:
        raw_events: Items of the calendarView "value" list.
        timezone: IANA zone the events were requested in.

    Returns:
        Events sorted by start; always a list, possibly empty.

    Raises:
        ConfigurationError: If the timezone is unknown.
        ParseError: If any event is malformed.
    """
    tz = load_timezone(timezone)
    events = [normalize_event(item, tz) for item in raw_events]
    logger.debug(f"Normalized {len(events)} events in {timezone}")
    return sort_events(events)
