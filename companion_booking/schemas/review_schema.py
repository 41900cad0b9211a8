"""Review records left by booking participants."""

from datetime import datetime
from typing import Optional

from companion_booking.schemas.booking_schema import CamelModel


class Review(CamelModel):
    """A submitted review. One per (booking, reviewer)."""
    booking_id: str
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime
