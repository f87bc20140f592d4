"""
SQLAlchemy Implementation of Review Repository.
"""

from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from listindia.core.exceptions import BusinessRuleViolationException, DuplicateReviewException
from listindia.domain.models.review import Review
from listindia.domain.repositories.review_repository import ReviewRepository
from listindia.domain.schemas.review import ReviewFilter
from listindia.infrastructure.repositories.base_repository import SQLAlchemyRepository, is_unique_violation

SORT_COLUMNS = {
    "created_at": Review.created_at,
    "updated_at": Review.updated_at,
    "rating": Review.rating,
}


class SQLAlchemyReviewRepository(SQLAlchemyRepository[Review], ReviewRepository):
    """Review repository implementation using SQLAlchemy."""

    protected_fields = frozenset({"id", "business_id", "user_id"})

    def create(self, obj_in: Any) -> Review:
        """Insert a review; the (business_id, user_id) unique constraint decides duplicates."""
        review = Review(**dict(obj_in))
        self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                raise DuplicateReviewException() from exc
            raise BusinessRuleViolationException("Invalid review reference") from exc
        self.db.refresh(review)
        return review

    def list_by_business(self, business_id: int) -> List[Review]:
        return self.db.query(Review).filter(Review.business_id == business_id).all()

    def _page(self, query, filters: ReviewFilter) -> Dict[str, Any]:
        column = SORT_COLUMNS.get(filters.sort_by, Review.created_at)
        ordering = column.asc() if filters.order == "asc" else column.desc()

        total = query.count()
        reviews = (
            query.options(joinedload(Review.user))
            .order_by(ordering, Review.id.desc())
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )
        return {"items": reviews, "total": total}

    def get_for_business(self, business_id: int, filters: ReviewFilter) -> Dict[str, Any]:
        return self._page(self.db.query(Review).filter(Review.business_id == business_id), filters)

    def get_by_user(self, user_id: int, filters: ReviewFilter) -> Dict[str, Any]:
        return self._page(self.db.query(Review).filter(Review.user_id == user_id), filters)

    def get_rating_distribution(self, business_id: int) -> Dict[int, int]:
        results = (
            self.db.query(Review.rating, func.count(Review.id).label("count"))
            .filter(Review.business_id == business_id)
            .group_by(Review.rating)
            .all()
        )
        distribution = {star: 0 for star in range(1, 6)}
        for r in results:
            distribution[r.rating] = r.count
        return distribution
