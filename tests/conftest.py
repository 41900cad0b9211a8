"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from companion_booking.lifecycle.reviews import ReviewBook
from companion_booking.lifecycle.state_machine import BookingStateMachine
from companion_booking.schemas.availability_schema import DayAvailability, WeeklyAvailability
from companion_booking.schemas.booking_schema import Booking, BookingStatus, PaymentStatus

# 2024-01-15 is a Monday
MONDAY = "2024-01-15"
SATURDAY = "2024-01-20"
NOW = datetime(2024, 1, 10, 12, 0)


@pytest.fixture
def state_machine():
    return BookingStateMachine(expiration_minutes=30)


@pytest.fixture
def review_book():
    return ReviewBook()


@pytest.fixture
def availability():
    """Mon-Fri 09:00-17:00, weekends off."""
    workday = DayAvailability(enabled=True, start_time="09:00", end_time="17:00")
    return WeeklyAvailability(
        monday=workday,
        tuesday=workday,
        wednesday=workday,
        thursday=workday,
        friday=workday,
        saturday=DayAvailability(enabled=False, start_time="10:00", end_time="14:00"),
        sunday=None,
    )


def make_booking(
    time: str = "13:00",
    date: str = MONDAY,
    duration_hours: int = 1,
    status: BookingStatus = BookingStatus.ACCEPTED,
    payment_status: PaymentStatus = PaymentStatus.PENDING,
    booking_id: str = "bk_1",
    client_id: str = "cl_1",
    companion_id: str = "cp_1",
    created_at: Optional[datetime] = None,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id,
        client_id=client_id,
        companion_id=companion_id,
        date=date,
        time=time,
        duration_hours=duration_hours,
        status=status,
        payment_status=payment_status,
        created_at=created_at or NOW,
    )
