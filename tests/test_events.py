"""Tests for Graph event normalization."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from outlook_md.calendar import (
    Attendee,
    AttendeeType,
    ParseError,
    normalize_events,
    sort_attendees,
)
from outlook_md.calendar.events import load_timezone, parse_graph_datetime
from outlook_md.exceptions import ConfigurationError

UTC = ZoneInfo("UTC")


def _attendee(email, type_=AttendeeType.REQUIRED, name=""):
    return Attendee(name=name, email=email, type=type_)


class TestParseGraphDatetime:
    def test_bare_equals_offset_in_utc(self):
        """Should treat a bare timestamp as wall-clock time in the zone."""
        bare = parse_graph_datetime("2026-01-07T10:00:00", UTC)
        explicit = parse_graph_datetime("2026-01-07T10:00:00+00:00", UTC)
        assert bare == explicit

    def test_seven_digit_fraction(self):
        """Should accept Graph's 100-nanosecond precision."""
        dt = parse_graph_datetime("2026-01-07T10:00:00.1234567", UTC)
        assert dt.microsecond == 123456

    def test_bare_value_uses_target_zone(self):
        tz = ZoneInfo("America/New_York")
        dt = parse_graph_datetime("2026-01-07T10:00:00.0000000", tz)
        assert dt.tzinfo is tz
        assert dt.astimezone(timezone.utc) == datetime(2026, 1, 7, 15, tzinfo=timezone.utc)

    def test_offset_value_converted(self):
        """Should convert offset-qualified values into the target zone."""
        tz = ZoneInfo("Europe/Berlin")
        dt = parse_graph_datetime("2026-01-07T10:00:00Z", tz)
        assert dt.hour == 11
        assert dt.utcoffset().total_seconds() == 3600

    @pytest.mark.parametrize(
        "value",
        ["2026-01-07", "10:00:00", "2026/01/07 10:00:00", "not a date", "", None, 12],
    )
    def test_bad_shape_names_event(self, value):
        with pytest.raises(ParseError, match="event evt-1") as exc_info:
            parse_graph_datetime(value, UTC, event_id="evt-1")

        assert exc_info.value.event_id == "evt-1"

    def test_invalid_calendar_date(self):
        with pytest.raises(ParseError):
            parse_graph_datetime("2026-02-30T10:00:00", UTC)


class TestLoadTimezone:
    def test_unknown_timezone(self):
        with pytest.raises(ConfigurationError, match="invalid timezone: Mars/Olympus"):
            load_timezone("Mars/Olympus")


class TestSortAttendees:
    def test_role_rank(self):
        """Should order required, then optional, then resource."""
        attendees = [
            _attendee("room@x", AttendeeType.RESOURCE),
            _attendee("opt@x", AttendeeType.OPTIONAL),
            _attendee("req@x", AttendeeType.REQUIRED),
        ]

        result = sort_attendees(attendees)

        assert [a.type for a in result] == [
            AttendeeType.REQUIRED,
            AttendeeType.OPTIONAL,
            AttendeeType.RESOURCE,
        ]

    def test_case_insensitive_email(self):
        attendees = [_attendee("charlie@x"), _attendee("Alice@x"), _attendee("bob@x")]

        result = sort_attendees(attendees)

        assert [a.email for a in result] == ["Alice@x", "bob@x", "charlie@x"]

    def test_name_breaks_email_ties(self):
        attendees = [_attendee("a@x", name="zed"), _attendee("A@x", name="Amy")]

        result = sort_attendees(attendees)

        assert [a.name for a in result] == ["Amy", "zed"]

    def test_idempotent(self):
        attendees = [
            _attendee("b@x", AttendeeType.OPTIONAL),
            _attendee("a@x"),
            _attendee("c@x", AttendeeType.RESOURCE),
        ]

        once = sort_attendees(attendees)
        assert sort_attendees(once) == once

    def test_equal_keys_keep_input_order(self):
        """Should be stable for attendees with identical sort keys."""
        first = Attendee(name="Same", email="same@x", type=AttendeeType.REQUIRED)
        second = Attendee(name="SAME", email="SAME@x", type=AttendeeType.REQUIRED)

        assert sort_attendees([first, second])[0] is first
        assert sort_attendees([second, first])[0] is second


class TestNormalizeEvents:
    def test_single_event(self, graph_event):
        raw = graph_event(
            attendees=(
                ("Room 1", "room1@example.com", "resource"),
                ("Bob", "bob@example.com", "Required"),
                ("Carol", "carol@example.com", "optional"),
            )
        )

        [event] = normalize_events([raw], "UTC")

        assert event.id == "AAMkAGI2THVSAAA="
        assert event.subject == "Team Standup"
        assert event.is_all_day is False
        assert event.start == datetime(2026, 1, 7, 10, tzinfo=timezone.utc)
        assert event.end == datetime(2026, 1, 7, 10, 30, tzinfo=timezone.utc)
        assert event.location == "Conference Room A"
        assert event.organizer.email == "alice@example.com"
        assert [a.email for a in event.attendees] == [
            "bob@example.com",
            "carol@example.com",
            "room1@example.com",
        ]

    def test_empty(self):
        assert normalize_events([], "UTC") == []

    def test_sorted_by_start(self, graph_event):
        raw = [
            graph_event(event_id="late", start="2026-01-07T15:00:00"),
            graph_event(event_id="early", start="2026-01-07T08:00:00"),
        ]

        events = normalize_events(raw, "UTC")

        assert [e.id for e in events] == ["early", "late"]

    def test_equal_starts_keep_input_order(self, graph_event):
        """Should keep relative order of events starting together."""
        raw = [
            graph_event(event_id="first", start="2026-01-07T09:00:00"),
            graph_event(event_id="second", start="2026-01-07T09:00:00Z"),
        ]

        events = normalize_events(raw, "UTC")

        assert [e.id for e in events] == ["first", "second"]

    def test_all_day_event(self, graph_event):
        raw = graph_event(
            is_all_day=True,
            start="2026-01-07T00:00:00.0000000",
            end="2026-01-08T00:00:00.0000000",
        )

        [event] = normalize_events([raw], "America/New_York")

        assert event.is_all_day is True
        assert event.start.hour == 0
        assert event.start.tzinfo == ZoneInfo("America/New_York")

    def test_missing_optional_fields(self):
        """Should default absent fields to empty values."""
        raw = {
            "id": "bare",
            "start": {"dateTime": "2026-01-07T10:00:00"},
            "end": {"dateTime": "2026-01-07T11:00:00"},
        }

        [event] = normalize_events([raw], "UTC")

        assert event.subject == ""
        assert event.location == ""
        assert event.organizer.name == ""
        assert event.organizer.email == ""
        assert event.attendees == ()

    def test_missing_attendee_type_is_required(self):
        raw = {
            "id": "x",
            "start": {"dateTime": "2026-01-07T10:00:00"},
            "end": {"dateTime": "2026-01-07T11:00:00"},
            "attendees": [{"emailAddress": {"name": "Dan", "address": "dan@x"}}],
        }

        [event] = normalize_events([raw], "UTC")

        assert event.attendees[0].type is AttendeeType.REQUIRED

    def test_unknown_attendee_type(self, graph_event):
        raw = graph_event(event_id="evt-9", attendees=(("Eve", "eve@x", "spectator"),))

        with pytest.raises(ParseError, match="event evt-9"):
            normalize_events([raw], "UTC")

    def test_missing_start(self, graph_event):
        raw = graph_event(event_id="evt-2")
        del raw["start"]

        with pytest.raises(ParseError, match="event evt-2"):
            normalize_events([raw], "UTC")

    def test_missing_id(self, graph_event):
        raw = graph_event()
        del raw["id"]

        with pytest.raises(ParseError, match="without id"):
            normalize_events([raw], "UTC")


def _with(graph_event, **fields):
    raw = graph_event(event_id="evt-odd")
    raw.update(fields)
    return raw


class TestMalformedEvents:
    @pytest.mark.parametrize(
        "fields",
        [
            {"start": "2026-01-07T10:00:00"},
            {"end": ["2026-01-07T11:00:00"]},
            {"organizer": "alice"},
            {"organizer": {"emailAddress": "alice@example.com"}},
            {"location": "Room 1"},
            {"subject": 42},
            {"attendees": "bob@x"},
            {"attendees": ["bob@x"]},
            {"attendees": [{"type": 1}]},
            {"attendees": [{"emailAddress": {"address": 7}, "type": "required"}]},
        ],
    )
    def test_wrong_shapes_name_event(self, graph_event, fields):
        """Should raise ParseError naming the event for mistyped fields."""
        with pytest.raises(ParseError, match="event evt-odd") as exc_info:
            normalize_events([_with(graph_event, **fields)], "UTC")

        assert exc_info.value.event_id == "evt-odd"

    def test_null_nested_fields_are_empty(self, graph_event):
        raw = _with(graph_event, organizer=None, location=None, attendees=None, subject=None)

        [event] = normalize_events([raw], "UTC")

        assert event.organizer.email == ""
        assert event.location == ""
        assert event.subject == ""
        assert event.attendees == ()

    def test_non_object_event(self):
        with pytest.raises(ParseError, match="expected an event object"):
            normalize_events(["not-an-event"], "UTC")
