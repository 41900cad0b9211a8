"""Booking request validation.

Collects every problem with a request instead of stopping at the first,
so a booking form can show all of them at once. The current time is
passed in by the caller; nothing here reads the clock.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from companion_booking.errors import BookingValidationError
from companion_booking.schemas.booking_schema import BookingRequest, coerce_duration_hours
from companion_booking.utils import parse_date, parse_time, wall_clock

MIN_DURATION_HOURS = 1


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of ``validate_booking_request``."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    @property
    def error(self) -> Optional[BookingValidationError]:
        return None if self.valid else BookingValidationError(self.errors)

    def raise_for_error(self) -> None:
        if not self.valid:
            raise BookingValidationError(self.errors)


def _read_fields(request: Union[BookingRequest, Mapping[str, Any]]) -> tuple[Any, Any, Any]:
    if isinstance(request, BookingRequest):
        return request.date, request.time, request.duration_hours
    duration = request.get("duration_hours", request.get("durationHours", request.get("duration")))
    return request.get("date"), request.get("time"), duration


def _coerce_duration(value: Any) -> Optional[int]:
    value = coerce_duration_hours(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def validate_booking_request(
    request: Union[BookingRequest, Mapping[str, Any]], now: datetime
) -> ValidationResult:
    """
    Validate a candidate booking against its own fields and the current time.

    Args:
        request: A ``BookingRequest`` or a raw mapping with ``date``,
            ``time`` and ``duration_hours`` (``durationHours`` and
            ``duration`` are also read).
        now: Current wall-clock time in the companion's local zone.
            Any tzinfo is ignored.

    Returns:
        ``ValidationResult`` with every failure listed.
    """
    raw_date, raw_time, raw_duration = _read_fields(request)
    errors: list[str] = []

    parsed_date = None
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        errors.append("Date is required")
    else:
        try:
            parsed_date = parse_date(raw_date)
        except ValueError:
            errors.append("Date must be in YYYY-MM-DD format")

    parsed_minutes = None
    if raw_time is None or (isinstance(raw_time, str) and not raw_time.strip()):
        errors.append("Time is required")
    else:
        try:
            parsed_minutes = parse_time(raw_time)
        except ValueError:
            errors.append("Time must be in HH:MM format")

    duration = _coerce_duration(raw_duration)
    if duration is None or duration < MIN_DURATION_HOURS:
        errors.append("Duration must be at least 1 hour")

    if parsed_date is not None and parsed_minutes is not None:
        starts_at = datetime(
            parsed_date.year,
            parsed_date.month,
            parsed_date.day,
            parsed_minutes // 60,
            parsed_minutes % 60,
        )
        if starts_at < wall_clock(now):
            errors.append("Booking must be in the future")

    return ValidationResult(valid=not errors, errors=errors)
