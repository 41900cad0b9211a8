"""Pending-booking expiry rules.

A pending booking the companion has not answered expires once
``created_at + booking_expiration_minutes`` has passed. These helpers
only select overdue bookings; a scheduled job owned by the caller
applies the ``expire`` transition to each one.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from companion_booking.config import settings
from companion_booking.schemas.booking_schema import Booking, BookingStatus
from companion_booking.utils import to_utc


def _minutes(expiration_minutes: Optional[int]) -> int:
    if expiration_minutes is None:
        return settings.lifecycle.booking_expiration_minutes
    return expiration_minutes


def expiration_deadline(booking: Booking, expiration_minutes: Optional[int] = None) -> datetime:
    """UTC moment after which a pending booking may be expired."""
    return to_utc(booking.created_at) + timedelta(minutes=_minutes(expiration_minutes))


def is_expired(booking: Booking, now: datetime, expiration_minutes: Optional[int] = None) -> bool:
    """True when the booking is still pending and its deadline has passed."""
    if booking.status != BookingStatus.PENDING:
        return False
    return to_utc(now) > expiration_deadline(booking, expiration_minutes)


def find_expired(
    bookings: Iterable[Booking], now: datetime, expiration_minutes: Optional[int] = None
) -> list[Booking]:
    """Select the pending bookings whose deadline has passed, in input order."""
    return [b for b in bookings if is_expired(b, now, expiration_minutes)]
