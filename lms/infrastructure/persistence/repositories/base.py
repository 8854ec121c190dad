"""Base repository: generic lookups, create/update/delete and time-window counts."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from lms.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository over one ORM model.

    Methods flush but never commit; the surrounding SqlAlchemyUnitOfWork
    owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get(self, entity_id: str) -> ModelType | None:
        """Return a single ORM row by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _list_newest_first(self) -> list[ModelType]:
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).order_by(model.created_at.desc())
        )
        return list(result.scalars().all())

    async def _add(self, obj: ModelType) -> ModelType:
        """Persist a new row and reload server defaults (timestamps)."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _assign(
        self, obj: ModelType, fields: dict[str, Any], allowed: frozenset[str]
    ) -> ModelType:
        """Set allowed columns on obj and flush. JSON columns are flagged as modified."""
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(
                f"Cannot update {self.model.__name__} columns: {sorted(unknown)}"
            )
        for key, value in fields.items():
            setattr(obj, key, value)
            flag_modified(obj, key)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _remove(self, entity_id: str) -> bool:
        obj = await self._get(entity_id)
        if obj is None:
            return False
        await self.db.delete(obj)
        await self.db.flush()
        return True

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        """Count rows with start <= created_at <= end."""
        model: Any = self.model
        result = await self.db.execute(
            select(func.count())
            .select_from(self.model)
            .where(model.created_at >= start, model.created_at <= end)
        )
        return int(result.scalar_one())
