"""Timezone resolution and query windows for today/tomorrow/week."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from outlook_md.calendar.events import load_timezone
from outlook_md.calendar.models import TimeWindow
from outlook_md.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOCAL = "Local"
LOCALTIME_PATH = Path("/etc/localtime")


def _local_zone_name() -> str:
    """Best-effort IANA name of the system zone, falling back to UTC."""
    tz_env = os.environ.get("TZ", "").lstrip(":")
    if tz_env:
        return tz_env

    try:
        target = str(LOCALTIME_PATH.resolve())
    except OSError:
        target = ""
    if "zoneinfo/" in target:
        return target.split("zoneinfo/", 1)[1]

    logger.debug("Could not determine local timezone; using UTC")
    return "UTC"


def resolve_timezone(name: str) -> tuple[str, ZoneInfo]:
    """Resolve a --tz value to (IANA name, zone).

    Raises:
        ConfigurationError: If the name is unknown.
    """
    if name == LOCAL:
        name = _local_zone_name()
    return name, load_timezone(name)


def _day_window(day: date, days: int, tz: ZoneInfo) -> TimeWindow:
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=days), time.min, tzinfo=tz)
    return TimeWindow(start=start, end=end)


def today_window(tz: ZoneInfo, now: datetime | None = None) -> TimeWindow:
    """Local midnight today to local midnight tomorrow."""
    now = (now or datetime.now(tz)).astimezone(tz)
    return _day_window(now.date(), 1, tz)


def tomorrow_window(tz: ZoneInfo, now: datetime | None = None) -> TimeWindow:
    """Local midnight tomorrow to the midnight after."""
    now = (now or datetime.now(tz)).astimezone(tz)
    return _day_window(now.date() + timedelta(days=1), 1, tz)


def week_window(tz: ZoneInfo, now: datetime | None = None) -> TimeWindow:
    """Monday 00:00 of the current week to the following Monday 00:00."""
    now = (now or datetime.now(tz)).astimezone(tz)
    monday = now.date() - timedelta(days=now.weekday())
    return _day_window(monday, 7, tz)


WINDOWS: dict[str, Callable[..., TimeWindow]] = {
    "today": today_window,
    "tomorrow": tomorrow_window,
    "week": week_window,
}


def window_for(command: str, tz: ZoneInfo, now: datetime | None = None) -> TimeWindow:
    """Compute the window for a CLI command name."""
    try:
        builder = WINDOWS[command]
    except KeyError as e:
        raise ConfigurationError(f"unknown command: {command}") from e
    return builder(tz, now=now)
