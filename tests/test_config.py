"""Tests for configuration loading and validation."""

import pytest

from companion_booking.config import (
    AppConfig,
    LifecycleConfig,
    PaymentConfig,
    SchedulingConfig,
    _validate_config,
)


def _config_with(scheduling=None, lifecycle=None, payment=None) -> AppConfig:
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "scheduling", scheduling or SchedulingConfig())
    object.__setattr__(config, "lifecycle", lifecycle or LifecycleConfig())
    object.__setattr__(config, "payment", payment or PaymentConfig())
    object.__setattr__(config, "log_level", "INFO")
    object.__setattr__(config, "service_name", "test")
    return config


def _scheduling(start="09:00", end="21:00", interval=60) -> SchedulingConfig:
    scheduling = SchedulingConfig.__new__(SchedulingConfig)
    object.__setattr__(scheduling, "default_start_time", start)
    object.__setattr__(scheduling, "default_end_time", end)
    object.__setattr__(scheduling, "slot_interval_minutes", interval)
    return scheduling


def _lifecycle(expiration=30, max_length=500, min_rating=1, max_rating=5) -> LifecycleConfig:
    lifecycle = LifecycleConfig.__new__(LifecycleConfig)
    object.__setattr__(lifecycle, "booking_expiration_minutes", expiration)
    object.__setattr__(lifecycle, "max_review_length", max_length)
    object.__setattr__(lifecycle, "min_rating", min_rating)
    object.__setattr__(lifecycle, "max_rating", max_rating)
    return lifecycle


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_defaults_match_platform_policy(self):
        config = AppConfig()
        assert config.lifecycle.booking_expiration_minutes == 30
        assert config.scheduling.slot_interval_minutes == 60

    def test_malformed_default_start(self):
        with pytest.raises(ValueError, match="DEFAULT_START_TIME"):
            _validate_config(_config_with(scheduling=_scheduling(start="nine")))

    def test_inverted_default_window(self):
        with pytest.raises(ValueError, match="earlier than DEFAULT_END_TIME"):
            _validate_config(_config_with(scheduling=_scheduling(start="22:00", end="09:00")))

    @pytest.mark.parametrize("interval", [0, -30, 7])
    def test_bad_slot_interval(self, interval):
        with pytest.raises(ValueError, match="SLOT_INTERVAL_MINUTES"):
            _validate_config(_config_with(scheduling=_scheduling(interval=interval)))

    def test_bad_expiration(self):
        with pytest.raises(ValueError, match="BOOKING_EXPIRATION_MINUTES"):
            _validate_config(_config_with(lifecycle=_lifecycle(expiration=0)))

    def test_bad_rating_range(self):
        with pytest.raises(ValueError, match="MIN_RATING"):
            _validate_config(_config_with(lifecycle=_lifecycle(min_rating=6, max_rating=5)))

    def test_bad_commission(self):
        payment = PaymentConfig.__new__(PaymentConfig)
        object.__setattr__(payment, "commission_percentage", 150.0)
        object.__setattr__(payment, "currency", "NGN")
        with pytest.raises(ValueError, match="PLATFORM_COMMISSION_PERCENTAGE"):
            _validate_config(_config_with(payment=payment))

    @pytest.mark.parametrize("currency", ["", "naira", "ngn", "N1G"])
    def test_bad_currency(self, currency):
        payment = PaymentConfig.__new__(PaymentConfig)
        object.__setattr__(payment, "commission_percentage", 20.0)
        object.__setattr__(payment, "currency", currency)
        with pytest.raises(ValueError, match="CURRENCY"):
            _validate_config(_config_with(payment=payment))

    def test_safe_int_parsing(self):
        from companion_booking.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from companion_booking.config import _safe_int

        monkeypatch.setenv("BOOKING_TEST_INT", "thirty")
        with pytest.raises(ValueError, match="BOOKING_TEST_INT"):
            _safe_int("BOOKING_TEST_INT", "30")

    def test_safe_float_parsing(self):
        from companion_booking.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "12.5") == pytest.approx(12.5)
