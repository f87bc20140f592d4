"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from listindia.core.exceptions import ConflictException
from listindia.domain.models.user import User
from listindia.domain.repositories.user_repository import UserRepository
from listindia.infrastructure.repositories.base_repository import SQLAlchemyRepository, is_unique_violation


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    protected_fields = frozenset({"id", "email", "password_hash", "role", "is_verified"})

    def get_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def create(self, obj_in) -> User:
        # Registration is the one path allowed to set credentials and role
        user = User(**dict(obj_in))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                raise ConflictException("An account with this email already exists") from exc
            raise
        self.db.refresh(user)
        return user
