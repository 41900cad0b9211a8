"""
Availability and slot engine.

Pure functions that turn a companion's weekly availability and the
bookings already on their calendar into bookable start times, and that
decide whether a candidate booking overlaps an existing one.

Intervals are half-open ``[start, end)``, so a booking ending at 11:00
and another starting at 11:00 do not conflict. Overlap is always tested
on absolute minutes (date and time combined), which keeps bookings that
run past midnight comparable.

Usage:
    slots = available_slots("2024-01-15", availability, bookings)
    if has_conflict(BookingRequest(date="2024-01-15", time=slots[0], duration_hours=2), bookings):
        ...
"""

import logging
from typing import Iterable, Optional, Union

from companion_booking.config import settings
from companion_booking.errors import BookingValidationError
from companion_booking.schemas.availability_schema import WeeklyAvailability
from companion_booking.schemas.booking_schema import Booking, BookingRequest, BookingStatus
from companion_booking.utils import (
    MINUTES_PER_HOUR,
    DateLike,
    absolute_minutes,
    day_name,
    format_minutes,
    parse_date,
    parse_time,
)

logger = logging.getLogger(__name__)

# Statuses that never occupy a companion's calendar
NON_BLOCKING_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.REJECTED})

# Availability checks probe each slot with this duration
SLOT_PROBE_HOURS = 1

TimeValue = Union[str, int]


def _as_minutes(value: TimeValue) -> int:
    return value if isinstance(value, int) else parse_time(value)


def generate_candidate_slots(
    start_time: str, end_time: str, interval_minutes: Optional[int] = None
) -> list[str]:
    """
    Every start time from ``start_time`` (inclusive) to ``end_time`` (exclusive).

    Same-day windows only; an empty list is returned when the window is
    empty or inverted.

    Raises:
        ValueError: If a time is malformed or the interval is not positive.
    """
    interval = (
        settings.scheduling.slot_interval_minutes if interval_minutes is None else interval_minutes
    )
    if interval < 1:
        raise ValueError(f"interval_minutes must be >= 1, got {interval}")

    start = parse_time(start_time)
    end = parse_time(end_time)
    return [format_minutes(minute) for minute in range(start, end, interval)]


def ranges_overlap(
    start_a: TimeValue, end_a: TimeValue, start_b: TimeValue, end_b: TimeValue
) -> bool:
    """Whether half-open intervals ``[start_a, end_a)`` and ``[start_b, end_b)`` overlap.

    Accepts "HH:MM" strings or integer minutes. Touching boundaries do
    not overlap.
    """
    return _as_minutes(start_a) < _as_minutes(end_b) and _as_minutes(end_a) > _as_minutes(start_b)


def compute_end_time(start_time: str, duration_hours: int) -> str:
    """
    Wall-clock end time for a booking, wrapping modulo 24 hours.

    A booking that runs past midnight gets an end time earlier than its
    start ("23:00" + 2h -> "01:00"). Do not compare such strings directly;
    use ``booking_interval`` for overlap tests.
    """
    return format_minutes(parse_time(start_time) + duration_hours * MINUTES_PER_HOUR)


def booking_interval(day: DateLike, start_time: str, duration_hours: int) -> tuple[int, int]:
    """Absolute ``[start, end)`` minutes for a booking on a given date."""
    start = absolute_minutes(day, start_time)
    return start, start + duration_hours * MINUTES_PER_HOUR


def _candidate_interval(candidate: BookingRequest) -> tuple[int, int]:
    errors = []
    if not candidate.date:
        errors.append("Date is required")
    if not candidate.time:
        errors.append("Time is required")
    duration = candidate.duration_hours
    if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
        errors.append("Duration must be at least 1 hour")
    if errors:
        raise BookingValidationError(errors)
    try:
        return booking_interval(candidate.date, candidate.time, candidate.duration_hours)
    except ValueError as exc:
        raise BookingValidationError([str(exc)]) from None


def find_conflicts(candidate: BookingRequest, existing_bookings: Iterable[Booking]) -> list[Booking]:
    """Return every blocking booking whose interval overlaps the candidate's."""
    start, end = _candidate_interval(candidate)
    conflicts = []
    for booking in existing_bookings:
        if booking.status in NON_BLOCKING_STATUSES:
            continue
        other_start, other_end = booking_interval(booking.date, booking.time, booking.duration_hours)
        if ranges_overlap(start, end, other_start, other_end):
            conflicts.append(booking)
    return conflicts


def has_conflict(candidate: BookingRequest, existing_bookings: Iterable[Booking]) -> bool:
    """
    Whether the candidate overlaps any cancelled/rejected-filtered existing booking.

    An empty (or fully filtered) list never conflicts. Bookings on other
    dates only conflict when their absolute interval genuinely overlaps,
    e.g. an evening booking that runs past midnight.

    Raises:
        BookingValidationError: If the candidate is incomplete or malformed.
    """
    return bool(find_conflicts(candidate, existing_bookings))


def available_slots(
    date: DateLike,
    weekly_availability: WeeklyAvailability,
    existing_bookings: Iterable[Booking],
    interval_minutes: Optional[int] = None,
) -> list[str]:
    """
    Bookable start times for a companion on ``date``, in ascending order.

    Each slot is probed as a one-hour booking. A slot returned here may
    still conflict for a longer duration, so callers must re-check with
    ``has_conflict`` and the real duration before committing.

    Raises:
        BookingValidationError: If ``date`` is malformed.
    """
    try:
        day = parse_date(date)
    except ValueError as exc:
        raise BookingValidationError([str(exc)]) from None

    name = day_name(day)
    day_availability = weekly_availability.for_day(name)
    if day_availability is None or not day_availability.enabled:
        logger.debug("Companion offline on %s (%s)", day.isoformat(), name)
        return []

    bookings = list(existing_bookings)
    date_str = day.isoformat()
    candidates = generate_candidate_slots(
        day_availability.start_time, day_availability.end_time, interval_minutes
    )
    slots = [
        slot
        for slot in candidates
        if not has_conflict(
            BookingRequest(date=date_str, time=slot, duration_hours=SLOT_PROBE_HOURS), bookings
        )
    ]
    logger.debug(
        "%d of %d slots available on %s", len(slots), len(candidates), date_str
    )
    return slots
