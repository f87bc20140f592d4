"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """List entities with pagination."""
        ...

    def count(self) -> int:
        """Count all entities."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Update an existing entity."""
        ...

    def delete(self, id: int) -> Optional[T]:
        """Delete an entity by ID."""
        ...

    def rollback(self) -> None:
        """Discard the pending unit of work."""
        ...
