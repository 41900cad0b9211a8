"""
Centralized configuration with environment variable overrides.

Platform policy values (slot granularity, booking expiry, review limits,
commission) live here. Scheduling and lifecycle logic read them as
defaults and always accept explicit overrides.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from companion_booking.utils import MINUTES_PER_DAY, parse_time

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation defaults for companion availability."""

    default_start_time: str = os.getenv("DEFAULT_START_TIME", "09:00")
    default_end_time: str = os.getenv("DEFAULT_END_TIME", "21:00")
    slot_interval_minutes: int = _safe_int("SLOT_INTERVAL_MINUTES", "60")


@dataclass(frozen=True)
class LifecycleConfig:
    """Booking expiry and review policy."""

    booking_expiration_minutes: int = _safe_int("BOOKING_EXPIRATION_MINUTES", "30")
    max_review_length: int = _safe_int("MAX_REVIEW_LENGTH", "500")
    min_rating: int = _safe_int("MIN_RATING", "1")
    max_rating: int = _safe_int("MAX_RATING", "5")


@dataclass(frozen=True)
class PaymentConfig:
    """Platform commission and the ISO 4217 currency that quotes are priced in."""

    commission_percentage: float = _safe_float("PLATFORM_COMMISSION_PERCENTAGE", "20")
    currency: str = os.getenv("CURRENCY", "NGN")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)
    payment: PaymentConfig = field(default_factory=PaymentConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "companion-booking")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for var_name, value in [
        ("DEFAULT_START_TIME", config.scheduling.default_start_time),
        ("DEFAULT_END_TIME", config.scheduling.default_end_time),
    ]:
        try:
            parse_time(value)
        except ValueError:
            raise ValueError(f"{var_name} must be HH:MM, got {value!r}") from None

    if parse_time(config.scheduling.default_start_time) >= parse_time(
        config.scheduling.default_end_time
    ):
        raise ValueError(
            "DEFAULT_START_TIME must be earlier than DEFAULT_END_TIME, got "
            f"{config.scheduling.default_start_time} >= {config.scheduling.default_end_time}"
        )
    interval = config.scheduling.slot_interval_minutes
    if interval < 1 or MINUTES_PER_DAY % interval != 0:
        raise ValueError(
            f"SLOT_INTERVAL_MINUTES must be >= 1 and divide a day evenly, got {interval}"
        )
    if config.lifecycle.booking_expiration_minutes < 1:
        raise ValueError(
            "BOOKING_EXPIRATION_MINUTES must be >= 1, "
            f"got {config.lifecycle.booking_expiration_minutes}"
        )
    if config.lifecycle.max_review_length < 1:
        raise ValueError(
            f"MAX_REVIEW_LENGTH must be >= 1, got {config.lifecycle.max_review_length}"
        )
    if not 1 <= config.lifecycle.min_rating <= config.lifecycle.max_rating:
        raise ValueError(
            "MIN_RATING must be >= 1 and <= MAX_RATING, got "
            f"{config.lifecycle.min_rating}..{config.lifecycle.max_rating}"
        )
    if not 0.0 <= config.payment.commission_percentage <= 100.0:
        raise ValueError(
            "PLATFORM_COMMISSION_PERCENTAGE must be between 0 and 100, "
            f"got {config.payment.commission_percentage}"
        )
    currency = config.payment.currency
    if len(currency) != 3 or not currency.isalpha() or not currency.isupper():
        raise ValueError(f"CURRENCY must be a three-letter ISO 4217 code, got {currency!r}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
