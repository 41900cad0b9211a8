"""Shared time and formatting helpers used across the scheduling core.

All overlap arithmetic works on integer minutes rather than "HH:MM"
strings. ``absolute_minutes`` anchors a wall-clock time to its calendar
date so that bookings running past midnight still compare correctly.
"""

import re
from datetime import date, datetime, timezone
from typing import Union

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

DAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[str, date]


def parse_time(value: str) -> int:
    """Parse a 24-hour "HH:MM" string into minutes since midnight.

    Examples:
        >>> parse_time("09:30")
        570
        >>> parse_time("00:00")
        0

    Raises:
        ValueError: If the value is not a valid 24-hour time.
    """
    if not isinstance(value, str):
        raise ValueError(f"Time must be a string in HH:MM format, got {value!r}")
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hours * MINUTES_PER_HOUR + minutes


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as "HH:MM", wrapping modulo 24 hours."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // MINUTES_PER_HOUR:02d}:{minutes % MINUTES_PER_HOUR:02d}"


def parse_date(value: DateLike) -> date:
    """Parse a "YYYY-MM-DD" string (or pass through a ``date``).

    Raises:
        ValueError: If the string is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Date must be a string in YYYY-MM-DD format, got {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Date must be in YYYY-MM-DD format, got {value!r}") from None


def absolute_minutes(day: DateLike, time_value: str) -> int:
    """Minutes elapsed since a fixed epoch (0001-01-01 00:00) for a date and time."""
    return parse_date(day).toordinal() * MINUTES_PER_DAY + parse_time(time_value)


def to_utc(moment: datetime) -> datetime:
    """Normalize a timestamp to aware UTC. Naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def wall_clock(moment: datetime) -> datetime:
    """Drop tzinfo so a timestamp compares against naive booking date/times."""
    return moment.replace(tzinfo=None)


def day_name(day: DateLike) -> str:
    """Lowercase English weekday name for a date, e.g. ``"monday"``."""
    return DAY_NAMES[parse_date(day).weekday()]


def _format_clock(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    suffix = "PM" if hours >= 12 else "AM"
    hours = hours % 12 or 12
    if mins:
        return f"{hours}:{mins:02d} {suffix}"
    return f"{hours} {suffix}"


def format_time_range(time_value: str, duration_hours: int) -> str:
    """Human-readable range for a booking start and duration.

    Examples:
        >>> format_time_range("14:00", 2)
        '2 PM - 4 PM'
        >>> format_time_range("09:30", 1)
        '9:30 AM - 10:30 AM'
    """
    start = parse_time(time_value)
    end = start + duration_hours * MINUTES_PER_HOUR
    return f"{_format_clock(start)} - {_format_clock(end)}"


def format_display_date(day: DateLike) -> str:
    """Long display form, e.g. ``"Monday, January 15, 2024"``."""
    parsed = parse_date(day)
    return f"{parsed.strftime('%A')}, {parsed.strftime('%B')} {parsed.day}, {parsed.year}"
