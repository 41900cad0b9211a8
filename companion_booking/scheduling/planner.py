"""
Pre-commit checks for a new booking.

Runs the same checks a booking endpoint performs before inserting a
row: request validation, the one-active-booking-per-pair rule, the
companion's availability window, and a conflict check with the real
requested duration.

The decision reflects the snapshot of bookings it was given. Callers
must run it inside the same per-companion lock or transaction as the
insert, otherwise two concurrent requests can both be accepted.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from companion_booking.errors import BookingConflictError, BookingError, BookingValidationError
from companion_booking.schemas.availability_schema import WeeklyAvailability
from companion_booking.schemas.booking_schema import Booking, BookingRequest, BookingStatus
from companion_booking.scheduling.availability import find_conflicts, generate_candidate_slots
from companion_booking.scheduling.validation import validate_booking_request
from companion_booking.utils import MINUTES_PER_HOUR, day_name, format_minutes, parse_time

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED})


@dataclass(frozen=True)
class BookingDecision:
    """Whether a booking request may be committed."""
    accepted: bool
    error: Optional[BookingError] = None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def has_active_booking(client_id: str, companion_id: str, bookings: Iterable[Booking]) -> bool:
    """True if the client already has a pending or accepted booking with the companion."""
    return any(
        b.client_id == client_id and b.companion_id == companion_id and b.status in ACTIVE_STATUSES
        for b in bookings
    )


def _outside_window(request: BookingRequest, availability: WeeklyAvailability) -> Optional[str]:
    day = day_name(request.date)
    window = availability.for_day(day)
    if window is None or not window.enabled:
        return f"Companion is not available on {day.capitalize()}"

    start = parse_time(request.time)
    if format_minutes(start) not in generate_candidate_slots(window.start_time, window.end_time):
        return f"{request.time} is not an offered start time on {day.capitalize()}"

    end = start + request.duration_hours * MINUTES_PER_HOUR
    if end > parse_time(window.end_time):
        return f"Booking would run past the companion's {window.end_time} finish"
    return None


def plan_booking(
    request: BookingRequest,
    client_id: str,
    companion_id: str,
    existing_bookings: Iterable[Booking],
    now: datetime,
    availability: Optional[WeeklyAvailability] = None,
) -> BookingDecision:
    """
    Decide whether a booking request can be committed.

    Args:
        request: The candidate booking.
        client_id: The requesting client.
        companion_id: The companion being booked.
        existing_bookings: Bookings on the companion's calendar (any status).
        now: Current wall-clock time for the past-date check.
        availability: Companion's weekly availability. When omitted the
            window check is skipped.

    Returns:
        ``BookingDecision``; ``error`` is a ``BookingValidationError`` or
        ``BookingConflictError`` when the request is refused.
    """
    bookings = list(existing_bookings)

    validation = validate_booking_request(request, now)
    if not validation.valid:
        return BookingDecision(accepted=False, error=validation.error)

    if client_id == companion_id:
        return BookingDecision(
            accepted=False,
            error=BookingValidationError(["Client and companion must be different users"]),
        )

    if has_active_booking(client_id, companion_id, bookings):
        return BookingDecision(
            accepted=False,
            error=BookingConflictError("Please wait for your current booking to fulfil"),
        )

    if availability is not None:
        reason = _outside_window(request, availability)
        if reason:
            return BookingDecision(accepted=False, error=BookingConflictError(reason))

    conflicts = find_conflicts(
        request, [b for b in bookings if b.companion_id == companion_id]
    )
    if conflicts:
        logger.info(
            "Request %s %s (%dh) conflicts with %s",
            request.date, request.time, request.duration_hours,
            ", ".join(b.id for b in conflicts),
        )
        return BookingDecision(
            accepted=False,
            error=BookingConflictError(
                "The requested time overlaps an existing booking",
                details=[b.id for b in conflicts],
            ),
        )
    return BookingDecision(accepted=True)
