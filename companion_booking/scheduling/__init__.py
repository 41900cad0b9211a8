from companion_booking.scheduling.availability import (
    available_slots,
    compute_end_time,
    generate_candidate_slots,
    has_conflict,
    ranges_overlap,
)
from companion_booking.scheduling.planner import BookingDecision, plan_booking
from companion_booking.scheduling.validation import ValidationResult, validate_booking_request

__all__ = [
    "available_slots",
    "compute_end_time",
    "generate_candidate_slots",
    "has_conflict",
    "ranges_overlap",
    "plan_booking",
    "BookingDecision",
    "validate_booking_request",
    "ValidationResult",
]
