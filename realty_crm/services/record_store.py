"""
Realty CRM Record Store
Generic find/insert/update/delete surface over the SQLAlchemy session
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, delete, func
import structlog

from ..core.database import Base
from ..core.exceptions import StoreError

logger = structlog.get_logger()


def _conditions(model: Type[Base], filters: Optional[Dict[str, Any]]) -> list:
    """Translate an equality filter mapping into column conditions.

    List, tuple and set values become IN clauses.
    """
    conditions = []
    for name, value in (filters or {}).items():
        column = getattr(model, name)
        if isinstance(value, (list, tuple, set)):
            conditions.append(column.in_(list(value)))
        elif value is None:
            conditions.append(column.is_(None))
        else:
            conditions.append(column == value)
    return conditions


class RecordStore:
    """Per-request access to every record collection"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str, model: Type[Base]):
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Record store operation failed",
                operation=operation,
                model=model.__name__,
                error=str(e)
            )
            raise StoreError(f"{operation} on {model.__name__} failed") from e

    async def find_by_id(self, model: Type[Base], record_id: UUID):
        async with self._guard("find_by_id", model):
            result = await self.db.execute(select(model).where(model.id == record_id))
            return result.scalar_one_or_none()

    async def find_one(self, model: Type[Base], **filters):
        async with self._guard("find_one", model):
            result = await self.db.execute(
                select(model).where(*_conditions(model, filters)).limit(1)
            )
            return result.scalar_one_or_none()

    async def find_many(
        self,
        model: Type[Base],
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence] = None,
        limit: Optional[int] = None,
    ) -> List:
        async with self._guard("find_many", model):
            query = select(model).where(*_conditions(model, filters))
            if order_by is not None:
                query = query.order_by(*order_by)
            if limit:
                query = query.limit(limit)
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def insert(self, record: Base):
        async with self._guard("insert", type(record)):
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
            return record

    async def update_by_id(self, model: Type[Base], record_id: UUID, patch: Dict[str, Any]):
        """Apply a partial update; returns None when the record is gone"""
        async with self._guard("update_by_id", model):
            result = await self.db.execute(select(model).where(model.id == record_id))
            record = result.scalar_one_or_none()
            if record is None:
                return None
            for name, value in patch.items():
                setattr(record, name, value)
            await self.db.commit()
            await self.db.refresh(record)
            return record

    async def delete_by_id(self, model: Type[Base], record_id: UUID) -> bool:
        async with self._guard("delete_by_id", model):
            result = await self.db.execute(delete(model).where(model.id == record_id))
            await self.db.commit()
            return result.rowcount > 0

    async def delete_many(self, model: Type[Base], filters: Dict[str, Any], commit: bool = True) -> int:
        """Delete every record matching ``filters``.

        With ``commit=False`` the deletion joins the session's open
        transaction and the caller commits.
        """
        async with self._guard("delete_many", model):
            result = await self.db.execute(delete(model).where(*_conditions(model, filters)))
            if commit:
                await self.db.commit()
            return result.rowcount

    async def commit(self):
        async with self._guard("commit", Base):
            await self.db.commit()

    async def group_count(
        self,
        model: Type[Base],
        column_name: str,
        filters: Optional[Dict[str, Any]] = None,
        exclude_null: Sequence[str] = (),
    ) -> List[Tuple[Any, int]]:
        """Count records per distinct value of ``column_name``"""
        async with self._guard("group_count", model):
            column = getattr(model, column_name)
            conditions = _conditions(model, filters)
            conditions.extend(getattr(model, name).is_not(None) for name in exclude_null)
            query = (
                select(column, func.count(model.id).label("count"))
                .where(*conditions)
                .group_by(column)
            )
            result = await self.db.execute(query)
            return [(row[0], row[1]) for row in result.all()]

    async def execute(self, model: Type[Base], query):
        """Run a prepared select (joins the read surface can't express)"""
        async with self._guard("execute", model):
            result = await self.db.execute(query)
            return result.all()
