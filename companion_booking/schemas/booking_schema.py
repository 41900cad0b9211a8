"""Booking data models and status enumerations."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from companion_booking.utils import parse_date, parse_time


class BookingStatus(str, Enum):
    """All statuses a booking can hold."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class PaymentAction(str, Enum):
    """Payment work the caller must perform after a transition."""
    NONE = "none"
    REFUND = "refund"
    SPLIT = "split"


class BookingAction(str, Enum):
    """Actions that move a booking between statuses."""
    ACCEPT = "accept"
    REJECT = "reject"
    EXPIRE = "expire"
    CANCEL = "cancel"
    COMPLETE = "complete"


class Actor(str, Enum):
    CLIENT = "client"
    COMPANION = "companion"
    SYSTEM = "system"


# Legacy spellings accepted at the boundary and mapped to one canonical status.
STATUS_ALIASES: dict[str, BookingStatus] = {
    "confirmed": BookingStatus.ACCEPTED,
}


def normalize_status(value: Any) -> BookingStatus:
    """Map a raw status (including legacy aliases) onto ``BookingStatus``.

    Raises:
        ValueError: If the value is not a known status or alias.
    """
    if isinstance(value, BookingStatus):
        return value
    raw = str(value).strip().lower()
    if raw in STATUS_ALIASES:
        return STATUS_ALIASES[raw]
    return BookingStatus(raw)


def coerce_duration_hours(value: Any) -> Any:
    """Turn whole-hour values (2, 2.0, " 2 ") into int; return anything else unchanged."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


class CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingRequest(CamelModel):
    """Candidate booking before persistence.

    Fields are deliberately loose; ``validate_booking_request`` reports
    every problem instead of the model refusing to construct.
    """
    date: Optional[str] = None
    time: Optional[str] = None
    duration_hours: Any = None

    @field_validator("duration_hours", mode="before")
    @classmethod
    def _whole_hours(cls, value: Any) -> Any:
        return coerce_duration_hours(value)


class Booking(CamelModel):
    """Persisted booking between one client and one companion."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    client_id: str
    companion_id: str
    date: str
    time: str
    duration_hours: int = Field(ge=1)
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime
    total_amount: Optional[Decimal] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> BookingStatus:
        return normalize_status(value)

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_date(value)
        return value

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        parse_time(value)
        return value

    @model_validator(mode="after")
    def _distinct_participants(self) -> "Booking":
        if self.client_id == self.companion_id:
            raise ValueError("client_id and companion_id must differ")
        return self

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.client_id, self.companion_id)


class BookingQuote(BaseModel):
    """Price of a booking and its division between platform and companion."""
    total_amount: Decimal
    platform_fee: Decimal
    companion_earnings: Decimal
    commission_percentage: float
    currency: str


class SlotsResponse(BaseModel):
    """Serialized slot list returned to the booking UI."""
    slots: list[str] = Field(default_factory=list)
