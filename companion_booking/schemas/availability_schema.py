"""Companion weekly availability models."""

from typing import Optional

from pydantic import field_validator, model_validator

from companion_booking.config import settings
from companion_booking.schemas.booking_schema import CamelModel
from companion_booking.utils import DAY_NAMES, parse_time

WEEKDAYS = DAY_NAMES[:5]


class DayAvailability(CamelModel):
    """Working window for one day of the week (same-day only, no overnight spans)."""
    enabled: bool = False
    start_time: str = settings.scheduling.default_start_time
    end_time: str = settings.scheduling.default_end_time

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        parse_time(value)
        return value

    @model_validator(mode="after")
    def _window_is_ordered(self) -> "DayAvailability":
        if self.enabled and parse_time(self.start_time) >= parse_time(self.end_time):
            raise ValueError(
                f"start_time must be earlier than end_time, got {self.start_time}-{self.end_time}"
            )
        return self


class WeeklyAvailability(CamelModel):
    """Recurring availability keyed by weekday. A missing day means offline."""
    monday: Optional[DayAvailability] = None
    tuesday: Optional[DayAvailability] = None
    wednesday: Optional[DayAvailability] = None
    thursday: Optional[DayAvailability] = None
    friday: Optional[DayAvailability] = None
    saturday: Optional[DayAvailability] = None
    sunday: Optional[DayAvailability] = None

    def for_day(self, name: str) -> Optional[DayAvailability]:
        """Return the entry for a lowercase weekday name, or None."""
        if name not in DAY_NAMES:
            raise ValueError(f"Unknown day of week: {name!r}")
        return getattr(self, name)

    @classmethod
    def default(cls) -> "WeeklyAvailability":
        """Weekdays enabled within the configured default window, weekends off."""
        return cls(
            **{
                name: DayAvailability(enabled=name in WEEKDAYS)
                for name in DAY_NAMES
            }
        )
