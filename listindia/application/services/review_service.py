"""Review service — review use cases.

Every committed create, update or delete is followed by an explicit call to
the rating aggregator, so by the time a use case returns the owning
business's rating and review_count already reflect the new review set.
"""

from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from listindia.application.services.rating_aggregator import RatingAggregator, summarize
from listindia.core.exceptions import EntityNotFoundException, ForbiddenException
from listindia.domain.models.business import Business
from listindia.domain.models.review import Review
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.repositories.review_repository import ReviewRepository
from listindia.domain.schemas.auth import AuthContext
from listindia.domain.schemas.business import Pagination
from listindia.domain.schemas.review import (
    ReviewCreate,
    ReviewFilter,
    ReviewMutationResult,
    ReviewPage,
    ReviewRead,
    ReviewStats,
    ReviewUpdate,
)

logger = structlog.get_logger(__name__)


def to_read(review: Review, identity: Optional[AuthContext] = None) -> ReviewRead:
    read = ReviewRead.model_validate(review)
    if identity is not None and identity.user_id == review.user_id:
        read = read.model_copy(update={"is_owner": True})
    return read


def _mutation_result(
    businesses: BusinessRepository,
    business_id: int,
    review: Optional[ReviewRead],
    business: Optional[Business] = None,
) -> ReviewMutationResult:
    """Build the write response; the write has already committed, so a failed
    read of the aggregate leaves it unknown instead of failing the request."""
    if business is None:
        try:
            business = businesses.get_by_id(business_id)
        except SQLAlchemyError:
            businesses.rollback()
            logger.warning("Business aggregate unavailable after review write", business_id=business_id)
            return ReviewMutationResult(review=review)
    if business is None:
        return ReviewMutationResult(review=review, business_rating=0.0, business_review_count=0)
    return ReviewMutationResult(
        review=review,
        business_rating=business.rating,
        business_review_count=business.review_count,
    )


def _get_own_review(reviews: ReviewRepository, review_id: int, identity: AuthContext) -> Review:
    review = reviews.get_by_id(review_id)
    if review is None:
        raise EntityNotFoundException("Review not found")
    if review.user_id != identity.user_id:
        raise ForbiddenException("You can only modify your own reviews")
    return review


def create_review(
    reviews: ReviewRepository,
    businesses: BusinessRepository,
    aggregator: RatingAggregator,
    identity: AuthContext,
    body: ReviewCreate,
) -> ReviewMutationResult:
    if businesses.get_approved(body.business_id) is None:
        raise EntityNotFoundException("Business not found or not approved")

    review = reviews.create(
        {
            "business_id": body.business_id,
            "user_id": identity.user_id,
            "rating": body.rating,
            "comment": body.comment,
        }
    )
    logger.info("Review created", review_id=review.id, business_id=review.business_id)

    business = aggregator.recompute(review.business_id)
    return _mutation_result(businesses, review.business_id, to_read(review, identity), business)


def update_review(
    reviews: ReviewRepository,
    businesses: BusinessRepository,
    aggregator: RatingAggregator,
    identity: AuthContext,
    review_id: int,
    body: ReviewUpdate,
) -> ReviewMutationResult:
    review = _get_own_review(reviews, review_id, identity)
    review = reviews.update(review, body)
    logger.info("Review updated", review_id=review.id, business_id=review.business_id)

    business = aggregator.recompute(review.business_id)
    return _mutation_result(businesses, review.business_id, to_read(review, identity), business)


def delete_review(
    reviews: ReviewRepository,
    businesses: BusinessRepository,
    aggregator: RatingAggregator,
    identity: AuthContext,
    review_id: int,
) -> ReviewMutationResult:
    review = _get_own_review(reviews, review_id, identity)
    business_id = review.business_id
    reviews.delete(review.id)
    logger.info("Review deleted", review_id=review_id, business_id=business_id)

    business = aggregator.recompute(business_id)
    return _mutation_result(businesses, business_id, None, business)


def get_review(reviews: ReviewRepository, review_id: int, identity: Optional[AuthContext]) -> ReviewRead:
    review = reviews.get_by_id(review_id)
    if review is None:
        raise EntityNotFoundException("Review not found")
    return to_read(review, identity)


def _page(result: dict, filters: ReviewFilter, identity: Optional[AuthContext]) -> ReviewPage:
    return ReviewPage(
        items=[to_read(r, identity) for r in result["items"]],
        pagination=Pagination.build(result["total"], filters.limit, filters.offset),
    )


def get_business_reviews(
    reviews: ReviewRepository,
    businesses: BusinessRepository,
    business_id: int,
    filters: ReviewFilter,
    identity: Optional[AuthContext],
) -> ReviewPage:
    if businesses.get_approved(business_id) is None:
        raise EntityNotFoundException("Business not found or not approved")
    return _page(reviews.get_for_business(business_id, filters), filters, identity)


def get_user_reviews(reviews: ReviewRepository, identity: AuthContext, filters: ReviewFilter) -> ReviewPage:
    return _page(reviews.get_by_user(identity.user_id, filters), filters, identity)


def get_review_stats(reviews: ReviewRepository, businesses: BusinessRepository, business_id: int) -> ReviewStats:
    if businesses.get_approved(business_id) is None:
        raise EntityNotFoundException("Business not found or not approved")

    distribution = reviews.get_rating_distribution(business_id)
    average, total = summarize(
        star for star, count in distribution.items() for _ in range(count)
    )
    return ReviewStats(
        business_id=business_id,
        total_reviews=total,
        average_rating=average,
        distribution=distribution,
    )
