"""Rating aggregator — keeps a business's rating and review_count in line with its reviews."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Tuple

import structlog
from sqlalchemy.exc import SQLAlchemyError

from listindia.domain.models.business import Business
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.repositories.review_repository import ReviewRepository

logger = structlog.get_logger(__name__)

ONE_DECIMAL = Decimal("0.1")


def summarize(ratings: Iterable[int]) -> Tuple[float, int]:
    """Mean rating rounded half-up to one decimal, and the review count."""
    ratings = list(ratings)
    if not ratings:
        return 0.0, 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)), len(ratings)


class RatingAggregator:
    """Recomputes derived rating fields after a review is created, updated or deleted.

    Every recompute re-reads the full review set, so the result does not depend
    on earlier values. Concurrent recomputes of one business are last-write-wins.
    """

    def __init__(self, businesses: BusinessRepository, reviews: ReviewRepository):
        self.businesses = businesses
        self.reviews = reviews

    def recompute(self, business_id: int) -> Optional[Business]:
        """Refresh the aggregate; never raises to the caller.

        Returns the updated business, or None when the business is gone or the
        store failed (the previous values are then left as they were).
        """
        try:
            business = self.businesses.get_by_id(business_id)
            if business is None:
                logger.info("Rating recompute skipped, business not found", business_id=business_id)
                return None

            rating, review_count = summarize(r.rating for r in self.reviews.list_by_business(business_id))
            business = self.businesses.set_rating_summary(business, rating, review_count)
        except SQLAlchemyError:
            self.businesses.rollback()
            logger.exception("Rating recompute failed", business_id=business_id)
            return None

        logger.info(
            "Rating recomputed",
            business_id=business_id,
            rating=rating,
            review_count=review_count,
        )
        return business
