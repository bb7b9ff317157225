"""
Entity store adapter.

The records service talks to storage only through EntityStore: equality
filters ANDed together, one record or a materialized list back. SqlAlchemyStore
implements the contract over an AsyncSession.
"""

import abc
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from billbook.app.core.exceptions import StoreConflictError, StoreFailureError

Filters = Mapping[str, Any]


class EntityStore(abc.ABC):
    """Abstract CRUD contract consumed by the records service."""

    @abc.abstractmethod
    async def select_one(self, table: Any, filters: Filters) -> Optional[Any]:
        ...

    @abc.abstractmethod
    async def select_all(self, table: Any, filters: Filters, order_by: Optional[str] = None) -> List[Any]:
        ...

    @abc.abstractmethod
    async def insert(self, table: Any, values: Mapping[str, Any]) -> Any:
        ...

    @abc.abstractmethod
    async def update(self, table: Any, values: Mapping[str, Any], filters: Filters) -> Optional[Any]:
        ...

    @abc.abstractmethod
    async def delete(self, table: Any, filters: Filters) -> Optional[Any]:
        ...

    @abc.abstractmethod
    def transaction(self):
        """Async context manager: commit on success, roll back on any error."""


def translate_store_error(exc: SQLAlchemyError) -> StoreFailureError:
    """Map an engine error onto the store failure taxonomy."""
    if isinstance(exc, IntegrityError):
        return StoreConflictError()
    return StoreFailureError()


class SqlAlchemyStore(EntityStore):
    """
    EntityStore backed by a SQLAlchemy AsyncSession.

    Tables are ORM model classes; filter keys are their attribute names.
    Writes are flushed immediately so constraint violations surface inside
    the operation that caused them.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _criteria(table: Any, filters: Filters) -> list:
        return [getattr(table, name) == value for name, value in filters.items()]

    async def select_one(self, table: Any, filters: Filters) -> Optional[Any]:
        try:
            result = await self.session.execute(
                select(table).where(*self._criteria(table, filters)).limit(1)
            )
        except SQLAlchemyError as exc:
            raise translate_store_error(exc) from exc
        return result.scalar_one_or_none()

    async def select_all(self, table: Any, filters: Filters, order_by: Optional[str] = None) -> List[Any]:
        query = select(table).where(*self._criteria(table, filters))
        if order_by:
            query = query.order_by(getattr(table, order_by), table.id)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise translate_store_error(exc) from exc
        return list(result.scalars().all())

    async def insert(self, table: Any, values: Mapping[str, Any]) -> Any:
        record = table(**values)
        self.session.add(record)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise translate_store_error(exc) from exc
        return record

    async def update(self, table: Any, values: Mapping[str, Any], filters: Filters) -> Optional[Any]:
        record = await self.select_one(table, filters)
        if record is None:
            return None

        for field, value in values.items():
            setattr(record, field, value)

        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise translate_store_error(exc) from exc
        return record

    async def delete(self, table: Any, filters: Filters) -> Optional[Any]:
        record = await self.select_one(table, filters)
        if record is None:
            return None

        try:
            await self.session.delete(record)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise translate_store_error(exc) from exc
        return record

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlAlchemyStore"]:
        try:
            yield self
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise translate_store_error(exc) from exc
        except Exception:
            await self.session.rollback()
            raise
