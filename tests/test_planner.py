"""Tests for the pre-commit booking planner."""

from companion_booking.errors import BookingConflictError, BookingValidationError
from companion_booking.schemas.booking_schema import BookingRequest, BookingStatus
from companion_booking.scheduling.planner import has_active_booking, plan_booking
from tests.conftest import MONDAY, NOW, SATURDAY, make_booking


def request(time="10:00", duration=1, date=MONDAY):
    return BookingRequest(date=date, time=time, duration_hours=duration)


class TestHasActiveBooking:
    def test_pending_booking_with_same_companion_is_active(self):
        bookings = [make_booking(status=BookingStatus.PENDING)]
        assert has_active_booking("cl_1", "cp_1", bookings)

    def test_completed_booking_is_not_active(self):
        bookings = [make_booking(status=BookingStatus.COMPLETED)]
        assert not has_active_booking("cl_1", "cp_1", bookings)

    def test_other_companion_is_ignored(self):
        bookings = [make_booking(status=BookingStatus.ACCEPTED, companion_id="cp_2")]
        assert not has_active_booking("cl_1", "cp_1", bookings)


class TestPlanBooking:
    def test_free_slot_is_accepted(self, availability):
        decision = plan_booking(request(), "cl_9", "cp_1", [make_booking("13:00")], NOW, availability)
        assert decision.accepted
        assert decision.error is None

    def test_validation_failure(self, availability):
        decision = plan_booking(request(date="2024-01-01"), "cl_9", "cp_1", [], NOW, availability)
        assert isinstance(decision.error, BookingValidationError)
        assert decision.error.errors == ["Booking must be in the future"]

    def test_client_cannot_book_themselves(self):
        decision = plan_booking(request(), "cp_1", "cp_1", [], NOW)
        assert isinstance(decision.error, BookingValidationError)

    def test_existing_active_booking_blocks_pair(self):
        existing = make_booking("16:00", client_id="cl_9", status=BookingStatus.PENDING)
        decision = plan_booking(request(), "cl_9", "cp_1", [existing], NOW)
        assert isinstance(decision.error, BookingConflictError)
        assert "current booking" in decision.error.message

    def test_multi_hour_request_rechecked_with_real_duration(self, availability):
        # 12:00 is offered as a 1-hour slot but a 2-hour booking runs into 13:00
        decision = plan_booking(
            request("12:00", duration=2), "cl_9", "cp_1", [make_booking("13:00")], NOW, availability
        )
        assert isinstance(decision.error, BookingConflictError)
        assert decision.error.details == ["bk_1"]

    def test_other_companions_bookings_do_not_conflict(self):
        other = make_booking("10:00", companion_id="cp_2", client_id="cl_2")
        decision = plan_booking(request(), "cl_9", "cp_1", [other], NOW)
        assert decision.accepted

    def test_day_off_refused(self, availability):
        decision = plan_booking(request(date=SATURDAY), "cl_9", "cp_1", [], NOW, availability)
        assert "not available on Saturday" in decision.error.message

    def test_start_outside_window_refused(self, availability):
        decision = plan_booking(request("18:00"), "cl_9", "cp_1", [], NOW, availability)
        assert isinstance(decision.error, BookingConflictError)

    def test_running_past_window_refused(self, availability):
        decision = plan_booking(request("16:00", duration=2), "cl_9", "cp_1", [], NOW, availability)
        assert "17:00" in decision.error.message

    def test_without_availability_window_is_not_checked(self):
        decision = plan_booking(request("22:00", duration=3), "cl_9", "cp_1", [], NOW)
        assert decision.accepted
