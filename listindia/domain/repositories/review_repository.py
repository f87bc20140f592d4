"""
Review Repository Interface.
Defines specific data access operations for Reviews.
"""

from typing import Any, Dict, List

from listindia.domain.models.review import Review
from listindia.domain.repositories.base import BaseRepository
from listindia.domain.schemas.review import ReviewFilter


class ReviewRepository(BaseRepository[Review]):
    """Interface for Review-specific operations."""

    def list_by_business(self, business_id: int) -> List[Review]:
        """Get every review currently attached to a business."""
        ...

    def get_for_business(self, business_id: int, filters: ReviewFilter) -> Dict[str, Any]:
        """Get a page of reviews for a business."""
        ...

    def get_by_user(self, user_id: int, filters: ReviewFilter) -> Dict[str, Any]:
        """Get a page of reviews written by a user."""
        ...

    def get_rating_distribution(self, business_id: int) -> Dict[int, int]:
        """Get review count per star rating (1-5) for a business."""
        ...
