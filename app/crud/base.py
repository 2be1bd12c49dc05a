from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class DuplicateError(Exception):
    """Raised when a unique constraint is violated (shipment/load numbers)."""


class SqlAlchemyRepository(Generic[ModelT]):
    """
    Row-level persistence for one model. Each write commits on its own; a
    unique-constraint hit is rolled back and surfaced as `DuplicateError`.
    """

    model: ClassVar[type[Base]]
    # Column holding the owning parent's id, set by `create(parent_id, ...)`.
    parent_field: ClassVar[str]

    def __init__(self, db: Session):
        self.db = db

    def _select(self, filters: dict[str, Any]):
        stmt = select(self.model)
        for field_name, value in filters.items():
            stmt = stmt.where(getattr(self.model, field_name) == value)
        return stmt

    def find(self, **filters: Any) -> list[ModelT]:
        stmt = self._select(filters).order_by(
            self.model.created_at.desc(),
            self.model.id.desc(),
        )
        return list(self.db.execute(stmt).scalars().all())

    def count(self, **filters: Any) -> int:
        stmt = select(func.count()).select_from(self._select(filters).subquery())
        return int(self.db.execute(stmt).scalar_one())

    def find_by_id(self, row_id: Any) -> ModelT | None:
        try:
            key = int(row_id)
        except (TypeError, ValueError):
            return None
        return self.db.get(self.model, key)

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(message) from e

    def create(self, parent_id: Any, data: dict[str, Any]) -> ModelT:
        obj = self.model(**{**data, self.parent_field: parent_id})
        self.db.add(obj)
        self._commit(f"{self.model.__tablename__} already exists (unique constraint hit).")
        self.db.refresh(obj)
        return obj

    def update(self, row_id: Any, patch: dict[str, Any]) -> ModelT | None:
        obj = self.find_by_id(row_id)
        if obj is None:
            return None
        for key, value in patch.items():
            setattr(obj, key, value)
        self._commit("Update violates unique constraint.")
        self.db.refresh(obj)
        return obj

    def delete(self, row_id: Any) -> bool:
        obj = self.find_by_id(row_id)
        if obj is None:
            return False
        self.db.delete(obj)
        self.db.commit()
        return True
