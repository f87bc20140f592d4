"""
SQLAlchemy Implementation of Business Repository.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from listindia.domain.models.business import Business
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.schemas.business import BusinessFilter
from listindia.infrastructure.repositories.base_repository import SQLAlchemyRepository

SORT_COLUMNS = {
    "name": Business.name,
    "rating": Business.rating,
    "review_count": Business.review_count,
    "created_at": Business.created_at,
}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLAlchemyBusinessRepository(SQLAlchemyRepository[Business], BusinessRepository):
    """Business repository implementation using SQLAlchemy."""

    protected_fields = frozenset({"id", "rating", "review_count"})

    def get_approved(self, id: int) -> Optional[Business]:
        return (
            self.db.query(Business)
            .filter(Business.id == id, Business.is_approved.is_(True))
            .first()
        )

    def get_with_filters(self, filters: BusinessFilter) -> Dict[str, Any]:
        """Get businesses with filtering, sorting and pagination."""
        query = self.db.query(Business)

        if filters.approved_only:
            query = query.filter(Business.is_approved.is_(True))
        if filters.owner_id is not None:
            query = query.filter(Business.owner_id == filters.owner_id)
        if filters.category:
            query = query.filter(Business.category == filters.category)
        if filters.city:
            query = query.filter(func.lower(Business.city) == filters.city.strip().lower())
        if filters.search:
            pattern = _like_pattern(filters.search.strip())
            query = query.filter(
                or_(
                    Business.name.ilike(pattern, escape="\\"),
                    Business.description.ilike(pattern, escape="\\"),
                )
            )
        if filters.featured:
            query = query.filter(Business.is_featured.is_(True))

        column = SORT_COLUMNS.get(filters.sort, Business.created_at)
        ordering = column.asc() if filters.order == "asc" else column.desc()

        total = query.count()
        businesses = (
            query.order_by(ordering, Business.id.desc())
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )

        return {"items": businesses, "total": total}

    def find_duplicate(self, name: str, address: str) -> Optional[Business]:
        return (
            self.db.query(Business)
            .filter(
                func.lower(Business.name) == name.strip().lower(),
                func.lower(Business.address) == address.strip().lower(),
            )
            .first()
        )

    def get_featured(self, limit: int = 10) -> List[Business]:
        return (
            self.db.query(Business)
            .filter(Business.is_featured.is_(True), Business.is_approved.is_(True))
            .order_by(
                Business.rating.desc(),
                Business.review_count.desc(),
                Business.created_at.desc(),
            )
            .limit(limit)
            .all()
        )

    def get_category_counts(self) -> List[Dict[str, Any]]:
        count = func.count(Business.id)
        results = (
            self.db.query(Business.category, count.label("count"))
            .filter(Business.is_approved.is_(True))
            .group_by(Business.category)
            .order_by(count.desc(), Business.category.asc())
            .all()
        )
        return [{"category": r.category, "count": r.count} for r in results]

    def get_city_counts(self) -> List[Dict[str, Any]]:
        count = func.count(Business.id)
        results = (
            self.db.query(Business.city, Business.state, count.label("count"))
            .filter(Business.is_approved.is_(True))
            .group_by(Business.city, Business.state)
            .order_by(count.desc(), Business.city.asc())
            .all()
        )
        return [{"city": r.city, "state": r.state, "count": r.count} for r in results]

    def set_rating_summary(self, business: Business, rating: float, review_count: int) -> Business:
        business.rating = rating
        business.review_count = review_count
        self.db.add(business)
        self._commit()
        self.db.refresh(business)
        return business
