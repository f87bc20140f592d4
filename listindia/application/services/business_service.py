"""Business service — listing queries and owner-side CRUD."""

from typing import List, Optional

import structlog

from listindia.core.exceptions import (
    BusinessRuleViolationException,
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
)
from listindia.domain.models.business import Business, BusinessCategory
from listindia.domain.models.user import UserRole
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.schemas.auth import AuthContext
from listindia.domain.schemas.business import (
    BusinessCreate,
    BusinessFilter,
    BusinessPage,
    BusinessRead,
    BusinessUpdate,
    CategoryCount,
    CityCount,
    Pagination,
)

logger = structlog.get_logger(__name__)

MAX_PAGE_SIZE = 100
FEATURED_LIMIT = 10
VALID_SORT_FIELDS = {"name", "rating", "review_count", "created_at"}


def normalize_category(category: Optional[str]) -> Optional[BusinessCategory]:
    """Map a query-string category to the enum; None and "all" mean no filter."""
    if not category or category.strip().lower() == "all":
        return None
    try:
        return BusinessCategory(category.strip().lower())
    except ValueError:
        raise BusinessRuleViolationException(
            f"Unknown category '{category}'",
            details={"allowed": [c.value for c in BusinessCategory]},
        )


def build_filter(
    category: Optional[str] = None,
    city: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    sort: str = "created_at",
    order: str = "desc",
    limit: int = 50,
    offset: int = 0,
) -> BusinessFilter:
    """Clamp paging and fall back to newest-first for unknown sort options."""
    order = (order or "").lower()
    if sort not in VALID_SORT_FIELDS or order not in ("asc", "desc"):
        sort, order = "created_at", "desc"

    return BusinessFilter(
        category=normalize_category(category),
        city=city or None,
        search=search or None,
        featured=featured,
        sort=sort,
        order=order,
        limit=max(1, min(limit, MAX_PAGE_SIZE)),
        offset=max(offset, 0),
    )


def to_read(business: Business, identity: Optional[AuthContext] = None) -> BusinessRead:
    read = BusinessRead.model_validate(business)
    if identity is not None and identity.user_id == business.owner_id:
        read = read.model_copy(update={"is_owner": True})
    return read


def _page(repo: BusinessRepository, filters: BusinessFilter, identity: Optional[AuthContext] = None) -> BusinessPage:
    result = repo.get_with_filters(filters)
    return BusinessPage(
        items=[to_read(b, identity) for b in result["items"]],
        pagination=Pagination.build(result["total"], filters.limit, filters.offset),
    )


def get_businesses(
    repo: BusinessRepository,
    filters: BusinessFilter,
    identity: Optional[AuthContext] = None,
) -> BusinessPage:
    """Get approved businesses with filtering and pagination; the caller's own are flagged."""
    return _page(repo, filters, identity)


def get_owner_businesses(repo: BusinessRepository, identity: AuthContext, limit: int = 20, offset: int = 0) -> BusinessPage:
    """Get the caller's own listings, approved or not."""
    filters = BusinessFilter(
        owner_id=identity.user_id,
        approved_only=False,
        limit=max(1, min(limit, 50)),
        offset=max(offset, 0),
    )
    return _page(repo, filters, identity)


def get_business(repo: BusinessRepository, business_id: int) -> Business:
    business = repo.get_approved(business_id)
    if business is None:
        raise EntityNotFoundException("Business not found or not approved")
    return business


def get_featured(repo: BusinessRepository) -> List[Business]:
    return repo.get_featured(FEATURED_LIMIT)


def get_categories(repo: BusinessRepository) -> List[CategoryCount]:
    counts = []
    for row in repo.get_category_counts():
        value = row["category"].value
        counts.append(CategoryCount(value=value, label=value.capitalize(), count=row["count"]))
    return counts


def get_cities(repo: BusinessRepository) -> List[CityCount]:
    return [
        CityCount(city=r["city"], state=r["state"], label=f"{r['city']}, {r['state']}", count=r["count"])
        for r in repo.get_city_counts()
    ]


def create_business(repo: BusinessRepository, identity: AuthContext, body: BusinessCreate) -> Business:
    if repo.find_duplicate(body.name, body.address):
        raise ConflictException("A business with this name and address already exists")

    data = body.model_dump(mode="json")
    data.update(owner_id=identity.user_id, is_approved=True, is_featured=False)
    business = repo.create(data)
    logger.info("Business created", business_id=business.id, owner_id=identity.user_id)
    return business


def _get_managed(repo: BusinessRepository, business_id: int, identity: AuthContext) -> Business:
    business = repo.get_by_id(business_id)
    if business is None:
        raise EntityNotFoundException("Business not found")
    if identity.role != UserRole.ADMIN and business.owner_id != identity.user_id:
        raise ForbiddenException("Only the owner or an admin can modify this business")
    return business


def update_business(repo: BusinessRepository, identity: AuthContext, business_id: int, body: BusinessUpdate) -> Business:
    business = _get_managed(repo, business_id, identity)
    business = repo.update(business, body)
    logger.info("Business updated", business_id=business.id)
    return business


def delete_business(repo: BusinessRepository, identity: AuthContext, business_id: int) -> None:
    business = _get_managed(repo, business_id, identity)
    repo.delete(business.id)
    logger.info("Business deleted", business_id=business_id, by=identity.user_id)
