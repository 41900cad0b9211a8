"""
Review eligibility and the in-memory review book.

Either participant may review a completed booking once. Ratings are
whole numbers within the configured range and comments are trimmed,
stripped of angle brackets, and length-limited.

Usage:
    book = ReviewBook()
    result = book.submit(booking, reviewer_id="cl_1", rating=5, comment="Great", now=now)
    if not result.ok:
        return result.error.to_dict()
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from companion_booking.config import settings
from companion_booking.errors import BookingError, DuplicateReviewError, ReviewNotAllowedError
from companion_booking.logging_context import booking_scope, get_booking_logger
from companion_booking.schemas.booking_schema import Booking, BookingStatus
from companion_booking.schemas.review_schema import Review

logger = get_booking_logger(__name__)


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of a review submission."""
    review: Optional[Review] = None
    error: Optional[BookingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def sanitize_comment(comment: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace and angle brackets; empty becomes None."""
    if comment is None:
        return None
    cleaned = comment.replace("<", "").replace(">", "").strip()
    return cleaned or None


def check_review_eligibility(booking: Booking, reviewer_id: str) -> Optional[ReviewNotAllowedError]:
    """Return why ``reviewer_id`` may not review ``booking``, or None if they may."""
    if not booking.is_participant(reviewer_id):
        error = ReviewNotAllowedError("You can only review your own bookings")
        error.http_status = 403
        return error
    if booking.status != BookingStatus.COMPLETED:
        return ReviewNotAllowedError("Can only review completed bookings")
    return None


def _validate_content(rating: Any, comment: Optional[str]) -> list[str]:
    errors = []
    low, high = settings.lifecycle.min_rating, settings.lifecycle.max_rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        errors.append("Rating is required and must be a whole number")
    elif not low <= rating <= high:
        errors.append(f"Rating must be between {low} and {high}")

    limit = settings.lifecycle.max_review_length
    if comment is not None and len(comment) > limit:
        errors.append(f"Review must be {limit} characters or less")
    return errors


def average_rating(reviews: Iterable[Review]) -> Decimal:
    """Mean rating rounded half-up to two places; 0.00 with no reviews."""
    ratings = [r.rating for r in reviews]
    if not ratings:
        return Decimal("0.00")
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ReviewBook:
    """Holds submitted reviews keyed by (booking_id, reviewer_id)."""

    def __init__(self, reviews: Optional[Iterable[Review]] = None) -> None:
        self._reviews: dict[tuple[str, str], Review] = {}
        for review in reviews or []:
            self._reviews[(review.booking_id, review.reviewer_id)] = review

    def __len__(self) -> int:
        return len(self._reviews)

    def has_reviewed(self, booking_id: str, reviewer_id: str) -> bool:
        return (booking_id, reviewer_id) in self._reviews

    def submit(
        self,
        booking: Booking,
        reviewer_id: str,
        rating: Any,
        now: datetime,
        comment: Optional[str] = None,
    ) -> ReviewResult:
        """
        Record a review if the reviewer and booking qualify.

        Returns:
            ``ReviewResult`` carrying the stored review, or one of
            ``ReviewNotAllowedError`` / ``DuplicateReviewError``.
        """
        with booking_scope(booking.id):
            return self._submit(booking, reviewer_id, rating, now, comment)

    def _submit(
        self,
        booking: Booking,
        reviewer_id: str,
        rating: Any,
        now: datetime,
        comment: Optional[str],
    ) -> ReviewResult:
        not_allowed = check_review_eligibility(booking, reviewer_id)
        if not_allowed is not None:
            logger.info("Review by %s refused: %s", reviewer_id, not_allowed.message)
            return ReviewResult(error=not_allowed)

        if self.has_reviewed(booking.id, reviewer_id):
            logger.info("Duplicate review for booking %s by %s", booking.id, reviewer_id)
            return ReviewResult(
                error=DuplicateReviewError("Review already submitted for this booking")
            )

        errors = _validate_content(rating, comment)
        if errors:
            return ReviewResult(error=ReviewNotAllowedError("Review is invalid", details=errors))

        reviewee_id = (
            booking.companion_id if reviewer_id == booking.client_id else booking.client_id
        )
        review = Review(
            booking_id=booking.id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            comment=sanitize_comment(comment),
            created_at=now,
        )
        self._reviews[(booking.id, reviewer_id)] = review
        logger.info("Review recorded for booking %s by %s (%d)", booking.id, reviewer_id, rating)
        return ReviewResult(review=review)

    def reviews_for_booking(self, booking_id: str) -> list[Review]:
        return [r for (b_id, _), r in self._reviews.items() if b_id == booking_id]

    def reviews_about(self, user_id: str) -> list[Review]:
        """Reviews received by a user, in submission order."""
        return [r for r in self._reviews.values() if r.reviewee_id == user_id]

    def rating_for(self, user_id: str) -> Decimal:
        return average_rating(self.reviews_about(user_id))
