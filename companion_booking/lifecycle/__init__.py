from companion_booking.lifecycle.reviews import ReviewBook, average_rating
from companion_booking.lifecycle.state_machine import (
    BookingStateMachine,
    TransitionOutcome,
    chat_enabled,
    is_terminal,
)

__all__ = [
    "BookingStateMachine",
    "TransitionOutcome",
    "chat_enabled",
    "is_terminal",
    "ReviewBook",
    "average_rating",
]
