from __future__ import annotations

import re
from datetime import date, datetime

from booking_widget.application.exceptions import InvalidTimeError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([0-1][0-9]|2[0-3]):([0-5][0-9])(?::[0-5][0-9])?$")


def booking_day_of_week(value: date | datetime) -> int:
    """Monday-origin day index (Monday = 0 ... Sunday = 6).

    Equivalent to remapping a Sunday-origin index with (index + 6) % 7. Every
    day-of-week comparison against availability windows goes through here.
    """
    if isinstance(value, datetime):
        value = value.date()
    return value.weekday()


def to_calendar_date(value: date | datetime) -> date:
    """Truncate a datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_time_of_day(value: str) -> int:
    """Parse HH:MM (seconds tolerated and dropped) into minutes since midnight."""
    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise InvalidTimeError(f"Invalid time of day: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time_of_day(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeError(f"Minute of day out of range: {minutes}")
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


def format_booking_time(value: str) -> str:
    """Display form of an HH:MM value, e.g. "14:30" -> "2:30 PM"."""
    minutes = parse_time_of_day(value)
    hour, minute = divmod(minutes, 60)
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"
