"""Per-booking log correlation.

Every lifecycle operation on a booking runs inside ``booking_scope``,
which tags the log records it emits with that booking's ID. A booking
service can then grep one booking's status changes, refusals and
review submissions out of its logs with ``%(booking_id)s``.

Usage:
    from companion_booking.logging_context import booking_scope, get_booking_logger

    logger = get_booking_logger(__name__)
    with booking_scope(booking.id):
        logger.info("Accepted")  # record.booking_id == booking.id
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

NO_BOOKING_ID = "NO_BOOKING_ID"

_booking_id: ContextVar[str] = ContextVar("booking_id", default=NO_BOOKING_ID)


def set_booking_id(booking_id: str) -> None:
    """Tag the rest of the current context, e.g. a request handler, with ``booking_id``."""
    _booking_id.set(booking_id)


def get_booking_id() -> str:
    return _booking_id.get()


@contextmanager
def booking_scope(booking_id: str) -> Iterator[str]:
    """Tag records with ``booking_id`` for the duration of the block.

    The previous ID is restored on exit, so nested or sequential
    operations on different bookings never leak into each other.
    """
    token = _booking_id.set(booking_id)
    try:
        yield booking_id
    finally:
        _booking_id.reset(token)


class BookingIdFilter(logging.Filter):
    """Copies the current booking ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "booking_id"):
            record.booking_id = _booking_id.get()  # type: ignore[attr-defined]
        return True


def get_booking_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with a single BookingIdFilter attached."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, BookingIdFilter) for f in logger.filters):
        logger.addFilter(BookingIdFilter())
    return logger
