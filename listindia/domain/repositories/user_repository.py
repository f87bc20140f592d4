"""
User Repository Interface.
The credential store: lookups by id and by (normalized) email.
"""

from typing import Optional

from listindia.domain.models.user import User
from listindia.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, compared case-insensitively."""
        ...
