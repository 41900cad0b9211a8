"""Booking pricing and the payment action implied by each transition.

No money moves here. The caller performs refunds and splits through
its payment gateway after a transition has been applied.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from companion_booking.config import settings
from companion_booking.schemas.booking_schema import BookingQuote, PaymentAction, PaymentStatus

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def _to_decimal(value: Amount) -> Decimal:
    # str() first so floats like 0.1 keep their printed value
    return value if isinstance(value, Decimal) else Decimal(str(value))


def split_amount(
    total_amount: Amount, commission_percentage: Optional[float] = None
) -> tuple[Decimal, Decimal]:
    """
    Divide a charge into (platform_fee, companion_earnings).

    The platform fee is rounded half-up to two places and the companion
    receives the exact remainder, so the two always add back to the total.
    """
    commission = (
        settings.payment.commission_percentage
        if commission_percentage is None
        else commission_percentage
    )
    if not 0 <= commission <= 100:
        raise ValueError(f"commission_percentage must be between 0 and 100, got {commission}")

    total = _to_decimal(total_amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    if total < 0:
        raise ValueError(f"total_amount must not be negative, got {total}")
    fee = (total * _to_decimal(commission) / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return fee, total - fee


def quote_booking(
    hourly_rate: Amount, duration_hours: int, commission_percentage: Optional[float] = None
) -> BookingQuote:
    """Price a booking: rate x hours, then split between platform and companion."""
    if duration_hours < 1:
        raise ValueError(f"duration_hours must be >= 1, got {duration_hours}")
    commission = (
        settings.payment.commission_percentage
        if commission_percentage is None
        else commission_percentage
    )
    total = (_to_decimal(hourly_rate) * duration_hours).quantize(CENTS, rounding=ROUND_HALF_UP)
    fee, earnings = split_amount(total, commission)
    logger.debug("Quoted %s for %dh (fee %s, earnings %s)", total, duration_hours, fee, earnings)
    return BookingQuote(
        total_amount=total,
        platform_fee=fee,
        companion_earnings=earnings,
        commission_percentage=commission,
        currency=settings.payment.currency,
    )


def resolve_payment_action(rule: PaymentAction, payment_status: PaymentStatus) -> PaymentAction:
    """Turn a transition's payment rule into the concrete action to perform.

    Refunds only apply to bookings that were actually paid.
    """
    if rule == PaymentAction.REFUND and payment_status != PaymentStatus.PAID:
        return PaymentAction.NONE
    return rule
