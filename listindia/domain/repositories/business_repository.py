"""
Business Repository Interface.
Defines specific data access operations for Business listings.
"""

from typing import Any, Dict, List, Optional

from listindia.domain.models.business import Business
from listindia.domain.repositories.base import BaseRepository
from listindia.domain.schemas.business import BusinessFilter


class BusinessRepository(BaseRepository[Business]):
    """Interface for Business-specific operations."""

    def get_approved(self, id: int) -> Optional[Business]:
        """Get an approved business by ID."""
        ...

    def get_with_filters(self, filters: BusinessFilter) -> Dict[str, Any]:
        """Get businesses with filtering, sorting and pagination."""
        ...

    def find_duplicate(self, name: str, address: str) -> Optional[Business]:
        """Find a business with the same name and address (case-insensitive)."""
        ...

    def get_featured(self, limit: int = 10) -> List[Business]:
        """Get featured, approved businesses, best rated first."""
        ...

    def get_category_counts(self) -> List[Dict[str, Any]]:
        """Get approved business count grouped by category."""
        ...

    def get_city_counts(self) -> List[Dict[str, Any]]:
        """Get approved business count grouped by city and state."""
        ...

    def set_rating_summary(self, business: Business, rating: float, review_count: int) -> Business:
        """Write the derived rating fields. Reserved for the rating aggregator."""
        ...
