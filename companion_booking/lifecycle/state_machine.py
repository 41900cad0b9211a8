"""
Finite state machine for the booking lifecycle.

Defines the booking statuses, the actions that move a booking between
them, and the chat and payment consequences of each move. Transitions
never mutate the booking passed in: a successful transition returns an
updated copy, a rejected one returns the original untouched together
with an ``InvalidTransitionError``.

The machine checks state shape only. Authorizing the actor (is this the
companion on their own booking?) is the caller's job.

Usage:
    machine = BookingStateMachine()
    outcome = machine.apply(booking, BookingAction.ACCEPT, now=now)
    if outcome.ok:
        save(outcome.booking)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from companion_booking.errors import InvalidTransitionError
from companion_booking.lifecycle.expiration import expiration_deadline, is_expired
from companion_booking.lifecycle.payments import resolve_payment_action
from companion_booking.logging_context import booking_scope, get_booking_logger
from companion_booking.schemas.booking_schema import (
    Actor,
    Booking,
    BookingAction,
    BookingStatus,
    PaymentAction,
    normalize_status,
)

logger = get_booking_logger(__name__)

CHAT_ENABLED_STATUSES = frozenset({BookingStatus.ACCEPTED})

TERMINAL_STATUSES = frozenset({
    BookingStatus.COMPLETED,
    BookingStatus.REJECTED,
    BookingStatus.EXPIRED,
    BookingStatus.CANCELLED,
})


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    action: BookingAction
    actors: tuple[Actor, ...]
    payment_rule: PaymentAction = PaymentAction.NONE


@dataclass(frozen=True)
class StatusChange:
    """Audit record for an applied transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    action: BookingAction
    at: datetime


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of applying an action to a booking."""
    booking: Booking
    action: Union[BookingAction, str]
    previous_status: BookingStatus
    chat_enabled: bool
    payment_action: PaymentAction = PaymentAction.NONE
    change: Optional[StatusChange] = None
    error: Optional[InvalidTransitionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def chat_enabled(status: Union[BookingStatus, str]) -> bool:
    """Chat between client and companion is open only while a booking is accepted."""
    return normalize_status(status) in CHAT_ENABLED_STATUSES


def is_terminal(status: Union[BookingStatus, str]) -> bool:
    return normalize_status(status) in TERMINAL_STATUSES


class BookingStateMachine:
    """
    Stateless transition table for bookings.

    Every transition is listed explicitly. Anything not in the table is
    rejected with the list of actions that are valid from the current
    status.
    """

    TRANSITIONS: list[Transition] = [
        # --- Companion response ---
        Transition(BookingStatus.PENDING, BookingStatus.ACCEPTED,
                   BookingAction.ACCEPT, (Actor.COMPANION,)),
        Transition(BookingStatus.PENDING, BookingStatus.REJECTED,
                   BookingAction.REJECT, (Actor.COMPANION,), PaymentAction.REFUND),

        # --- No response in time ---
        Transition(BookingStatus.PENDING, BookingStatus.EXPIRED,
                   BookingAction.EXPIRE, (Actor.SYSTEM,), PaymentAction.REFUND),

        # --- Accepted booking ---
        Transition(BookingStatus.ACCEPTED, BookingStatus.CANCELLED,
                   BookingAction.CANCEL, (Actor.CLIENT, Actor.COMPANION), PaymentAction.REFUND),
        Transition(BookingStatus.ACCEPTED, BookingStatus.COMPLETED,
                   BookingAction.COMPLETE, (Actor.COMPANION,), PaymentAction.SPLIT),
    ]

    def __init__(self, expiration_minutes: Optional[int] = None) -> None:
        self._expiration_minutes = expiration_minutes

    def find_transition(
        self, status: Union[BookingStatus, str], action: BookingAction
    ) -> Optional[Transition]:
        status = normalize_status(status)
        for t in self.TRANSITIONS:
            if t.from_status == status and t.action == action:
                return t
        return None

    def get_valid_actions(self, status: Union[BookingStatus, str]) -> list[BookingAction]:
        """Return all actions valid from a status."""
        status = normalize_status(status)
        return [t.action for t in self.TRANSITIONS if t.from_status == status]

    def actor_may_trigger(self, action: BookingAction, actor: Actor) -> bool:
        """Whether an actor role is ever allowed to trigger an action."""
        return any(t.action == action and actor in t.actors for t in self.TRANSITIONS)

    def apply(
        self, booking: Booking, action: Union[BookingAction, str], now: datetime
    ) -> TransitionOutcome:
        """
        Apply an action to a booking.

        Log records emitted while applying carry ``booking.id`` as their
        ``booking_id``.

        Args:
            booking: The booking as currently persisted.
            action: The requested action, as a ``BookingAction`` or its value.
            now: Current time; stamps the audit record and gates ``expire``.

        Returns:
            ``TransitionOutcome`` with the updated booking, or the original
            booking and an ``InvalidTransitionError`` when the action is
            unknown or not allowed. Nothing is partially applied.
        """
        with booking_scope(booking.id):
            return self._apply(booking, action, now)

    def _refuse(
        self,
        booking: Booking,
        action: Union[BookingAction, str],
        reason: Optional[str] = None,
    ) -> TransitionOutcome:
        current = booking.status
        action_name = action.value if isinstance(action, BookingAction) else str(action)
        valid = [a.value for a in self.get_valid_actions(current)]
        logger.warning(
            "Rejected %s on booking %s in status %s", action_name, booking.id, current.value
        )
        return TransitionOutcome(
            booking=booking,
            action=action,
            previous_status=current,
            chat_enabled=chat_enabled(current),
            error=InvalidTransitionError(current.value, action_name, valid, reason=reason),
        )

    def _apply(
        self, booking: Booking, action: Union[BookingAction, str], now: datetime
    ) -> TransitionOutcome:
        try:
            action = BookingAction(action)
        except ValueError:
            return self._refuse(booking, action, reason=f"Unknown action '{action}'")

        current = booking.status
        transition = self.find_transition(current, action)
        if transition is None:
            return self._refuse(booking, action)

        if action == BookingAction.EXPIRE and not is_expired(
            booking, now, self._expiration_minutes
        ):
            deadline = expiration_deadline(booking, self._expiration_minutes)
            return self._refuse(
                booking, action,
                reason=f"Booking cannot expire until after {deadline.isoformat()}",
            )

        updated = booking.model_copy(update={"status": transition.to_status})
        payment_action = resolve_payment_action(transition.payment_rule, booking.payment_status)
        logger.info(
            "Booking %s: %s -> %s (action: %s, payment: %s)",
            booking.id, current.value, transition.to_status.value,
            action.value, payment_action.value,
        )
        return TransitionOutcome(
            booking=updated,
            action=action,
            previous_status=current,
            chat_enabled=chat_enabled(transition.to_status),
            payment_action=payment_action,
            change=StatusChange(
                from_status=current,
                to_status=transition.to_status,
                action=action,
                at=now,
            ),
        )


_default_machine = BookingStateMachine()


def accept_booking(booking: Booking, now: datetime) -> TransitionOutcome:
    return _default_machine.apply(booking, BookingAction.ACCEPT, now)


def reject_booking(booking: Booking, now: datetime) -> TransitionOutcome:
    return _default_machine.apply(booking, BookingAction.REJECT, now)


def expire_booking(booking: Booking, now: datetime) -> TransitionOutcome:
    return _default_machine.apply(booking, BookingAction.EXPIRE, now)


def cancel_booking(booking: Booking, now: datetime) -> TransitionOutcome:
    return _default_machine.apply(booking, BookingAction.CANCEL, now)


def complete_booking(booking: Booking, now: datetime) -> TransitionOutcome:
    return _default_machine.apply(booking, BookingAction.COMPLETE, now)
