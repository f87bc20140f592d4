"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from listindia.domain.repositories.base import BaseRepository
from listindia.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)

PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    return "UNIQUE" in str(exc.orig).upper()


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    # Columns the generic create/update paths never write
    protected_fields: frozenset = frozenset({"id"})

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _data(self, obj_in: Any) -> dict:
        if hasattr(obj_in, "model_dump"):
            obj_data = obj_in.model_dump(mode="json", exclude_unset=True)
        else:
            obj_data = dict(obj_in)
        return {k: v for k, v in obj_data.items() if k not in self.protected_fields}

    def rollback(self) -> None:
        self.db.rollback()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def list(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return self.db.query(self.model).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self.db.query(func.count(self.model.id)).scalar() or 0

    def create(self, obj_in: Any) -> ModelType:
        db_obj = self.model(**self._data(obj_in))
        self.db.add(db_obj)
        self._commit()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Any) -> ModelType:
        for field, value in self._data(obj_in).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.add(db_obj)
        self._commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: int) -> Optional[ModelType]:
        obj = self.db.get(self.model, id)
        if obj:
            self.db.delete(obj)
            self._commit()
        return obj
