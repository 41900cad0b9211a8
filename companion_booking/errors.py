"""Typed business errors returned by the scheduling core.

These describe expected outcomes of valid input meeting business rules.
Core functions return them inside result objects; callers that prefer
exception flow can ``raise`` them directly or use ``raise_for_error()``
on the result.
"""

from typing import Any, Optional


class BookingError(Exception):
    """Base class for all booking business errors."""

    code: str = "booking_error"
    http_status: int = 400

    def __init__(self, message: str, details: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: list[str] = list(details or [])

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation for an API response body."""
        return {"code": self.code, "message": self.message, "details": list(self.details)}


class BookingValidationError(BookingError):
    """A booking request is malformed. ``details`` lists every reason."""

    code = "validation_error"
    http_status = 400

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Booking request is invalid", details=errors)

    @property
    def errors(self) -> list[str]:
        return list(self.details)


class BookingConflictError(BookingError):
    """The requested slot overlaps another booking for the companion."""

    code = "booking_conflict"
    http_status = 409


class InvalidTransitionError(BookingError):
    """Raised when an action is not valid from the booking's current status."""

    code = "invalid_transition"
    http_status = 409

    def __init__(
        self,
        current_status: str,
        action: str,
        valid_actions: list[str],
        reason: Optional[str] = None,
    ) -> None:
        message = (
            f"No valid transition from '{current_status}' with action '{action}'. "
            f"Valid actions: {valid_actions}"
        )
        if reason:
            message = f"{message}. {reason}"
        super().__init__(message, details=list(valid_actions))
        self.current_status = current_status
        self.action = action
        self.valid_actions = list(valid_actions)


class DuplicateReviewError(BookingError):
    code = "duplicate_review"
    http_status = 409


class ReviewNotAllowedError(BookingError):
    """The reviewer or booking does not qualify for a review."""

    code = "review_not_allowed"
    http_status = 400
