"""Calendar domain models and the version 1 output schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

SCHEMA_VERSION = 1


class AttendeeType(str, Enum):
    """Attendee role, ordered required < optional < resource."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    RESOURCE = "resource"

    @property
    def rank(self) -> int:
        return _ATTENDEE_RANK[self]


_ATTENDEE_RANK = {
    AttendeeType.REQUIRED: 0,
    AttendeeType.OPTIONAL: 1,
    AttendeeType.RESOURCE: 2,
}


def format_instant(dt: datetime) -> str:
    """Render an aware datetime as ISO 8601 with offset ("Z" for UTC)."""
    text = dt.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def parse_instant(value: str) -> datetime:
    """Parse a string produced by format_instant()."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        raise ValueError(f"timestamp without offset: {value}")
    return dt


@dataclass(frozen=True)
class Attendee:
    """A single event attendee."""

    name: str
    email: str
    type: AttendeeType = AttendeeType.REQUIRED

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "email": self.email, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attendee:
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            type=AttendeeType(data.get("type", AttendeeType.REQUIRED.value)),
        )


@dataclass(frozen=True)
class Organizer:
    """The event organizer."""

    name: str = ""
    email: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "email": self.email}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Organizer:
        return cls(name=data.get("name", ""), email=data.get("email", ""))


@dataclass(frozen=True)
class CalendarEvent:
    """A normalized calendar event.

    `start`/`end` are aware datetimes in the requested output timezone;
    `attendees` is already in canonical order.
    """

    id: str
    subject: str
    is_all_day: bool
    start: datetime
    end: datetime
    location: str = ""
    organizer: Organizer = field(default_factory=Organizer)
    attendees: tuple[Attendee, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "isAllDay": self.is_all_day,
            "start": format_instant(self.start),
            "end": format_instant(self.end),
            "location": self.location,
            "organizer": self.organizer.to_dict(),
            "attendees": [a.to_dict() for a in self.attendees],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CalendarEvent:
        return cls(
            id=data["id"],
            subject=data.get("subject", ""),
            is_all_day=bool(data.get("isAllDay", False)),
            start=parse_instant(data["start"]),
            end=parse_instant(data["end"]),
            location=data.get("location", ""),
            organizer=Organizer.from_dict(data.get("organizer") or {}),
            attendees=tuple(Attendee.from_dict(a) for a in data.get("attendees") or []),
        )


@dataclass(frozen=True)
class TimeWindow:
    """Half-open query window [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow bounds must be timezone-aware")
        if not self.start < self.end:
            raise ValueError("TimeWindow start must be before end")

    def to_dict(self) -> dict[str, Any]:
        return {"start": format_instant(self.start), "end": format_instant(self.end)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeWindow:
        return cls(start=parse_instant(data["start"]), end=parse_instant(data["end"]))


@dataclass(frozen=True)
class CLIOutput:
    """Top-level document printed by the CLI."""

    timezone: str
    window: TimeWindow
    events: list[CalendarEvent] = field(default_factory=list)
    version: int = SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "timezone": self.timezone,
            "window": self.window.to_dict(),
            "events": [e.to_dict() for e in self.events or []],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CLIOutput:
        return cls(
            version=int(data["version"]),
            timezone=data["timezone"],
            window=TimeWindow.from_dict(data["window"]),
            events=[CalendarEvent.from_dict(e) for e in data.get("events") or []],
        )
