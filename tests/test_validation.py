"""Tests for booking request validation."""

from datetime import datetime, timezone

import pytest

from companion_booking.errors import BookingValidationError
from companion_booking.schemas.booking_schema import BookingRequest
from companion_booking.scheduling.validation import ValidationResult, validate_booking_request
from tests.conftest import MONDAY, NOW


class TestValidRequests:
    def test_future_request_is_valid(self):
        result = validate_booking_request(
            BookingRequest(date=MONDAY, time="13:00", duration_hours=2), NOW
        )
        assert result == ValidationResult(valid=True, errors=[])

    def test_starting_exactly_now_is_valid(self):
        now = datetime(2024, 1, 15, 13, 0)
        result = validate_booking_request(
            BookingRequest(date=MONDAY, time="13:00", duration_hours=1), now
        )
        assert result.valid

    def test_accepts_raw_mapping_with_camel_case(self):
        result = validate_booking_request(
            {"date": MONDAY, "time": "10:00", "durationHours": 1}, NOW
        )
        assert result.valid

    def test_accepts_numeric_string_duration(self):
        result = validate_booking_request({"date": MONDAY, "time": "10:00", "duration": "2"}, NOW)
        assert result.valid

    def test_model_coerces_whole_hour_durations(self):
        assert BookingRequest(duration_hours=2.0).duration_hours == 2
        assert BookingRequest(durationHours=" 3 ").duration_hours == 3

    def test_aware_now_is_compared_as_wall_clock(self):
        now = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
        result = validate_booking_request(
            BookingRequest(date=MONDAY, time="10:00", duration_hours=1), now
        )
        assert result.valid


class TestInvalidRequests:
    def test_missing_everything_reports_every_problem(self):
        result = validate_booking_request(BookingRequest(), NOW)
        assert not result.valid
        assert result.errors == [
            "Date is required",
            "Time is required",
            "Duration must be at least 1 hour",
        ]

    def test_zero_duration(self):
        result = validate_booking_request(
            BookingRequest(date=MONDAY, time="10:00", duration_hours=0), NOW
        )
        assert result.errors == ["Duration must be at least 1 hour"]

    def test_past_booking(self):
        result = validate_booking_request(
            BookingRequest(date="2024-01-01", time="10:00", duration_hours=1), NOW
        )
        assert result.errors == ["Booking must be in the future"]

    def test_earlier_today_is_past(self):
        result = validate_booking_request(
            BookingRequest(date="2024-01-10", time="11:59", duration_hours=1), NOW
        )
        assert "Booking must be in the future" in result.errors

    def test_past_and_bad_duration_collected_together(self):
        result = validate_booking_request(
            BookingRequest(date="2024-01-01", time="10:00", duration_hours=0), NOW
        )
        assert len(result.errors) == 2

    def test_malformed_date_reported_on_field(self):
        result = validate_booking_request(
            BookingRequest(date="15-01-2024", time="10:00", duration_hours=1), NOW
        )
        assert result.errors == ["Date must be in YYYY-MM-DD format"]

    def test_malformed_time_reported_on_field(self):
        result = validate_booking_request(
            BookingRequest(date=MONDAY, time="1pm", duration_hours=1), NOW
        )
        assert result.errors == ["Time must be in HH:MM format"]

    @pytest.mark.parametrize("duration", ["abc", 1.5, True, None, -2])
    def test_bad_durations(self, duration):
        result = validate_booking_request(
            {"date": MONDAY, "time": "10:00", "duration_hours": duration}, NOW
        )
        assert result.errors == ["Duration must be at least 1 hour"]

    @pytest.mark.parametrize("duration", [1.5, "abc", True, 0])
    def test_bad_durations_on_model_reported_as_field_error(self, duration):
        request = BookingRequest(date=MONDAY, time="10:00", duration_hours=duration)
        result = validate_booking_request(request, NOW)
        assert result.errors == ["Duration must be at least 1 hour"]

    def test_blank_strings_count_as_missing(self):
        result = validate_booking_request({"date": " ", "time": "", "duration_hours": 1}, NOW)
        assert result.errors == ["Date is required", "Time is required"]


class TestResultBehaviour:
    def test_repeated_validation_is_identical(self):
        request = BookingRequest(date="2024-01-01", time="10:00", duration_hours=0)
        assert validate_booking_request(request, NOW) == validate_booking_request(request, NOW)

    def test_raise_for_error_raises_with_all_errors(self):
        result = validate_booking_request(BookingRequest(), NOW)
        with pytest.raises(BookingValidationError) as exc_info:
            result.raise_for_error()
        assert len(exc_info.value.errors) == 3
        assert exc_info.value.to_dict()["code"] == "validation_error"

    def test_valid_result_has_no_error(self):
        result = validate_booking_request(
            BookingRequest(date=MONDAY, time="10:00", duration_hours=1), NOW
        )
        assert result.error is None
        result.raise_for_error()
