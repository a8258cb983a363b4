"""
SessionLog Backend — Persistence Store
========================================

What:  The key-based store the controller talks to, and its SQLAlchemy
       implementation.
Why:   The controller only needs find/create/upsert/delete/save. Keeping that
       behind a Protocol means the controller never builds queries and tests
       can substitute any object with the same shape.
How:   `SqlAlchemyStore` is constructed per request with the resource's model
       and the request's AsyncSession. It flushes but never commits; the
       `get_db_session` dependency owns the transaction.

Error Translation:
    Every SQLAlchemyError is logged and re-raised as PersistenceError with
    the original error type and text in its context, which the error
    responder returns in the 500 body.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol, Type

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sessionlog.database import Base
from sessionlog.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class PersistenceStore(Protocol):
    """Contract between ResourceController and whatever stores the records."""

    async def find_all(self) -> List[Any]: ...
    async def find_by_id(self, record_id: int) -> Optional[Any]: ...
    async def create(self, fields: Dict[str, Any]) -> Any: ...
    async def upsert(self, record_id: int, fields: Dict[str, Any]) -> Any: ...
    async def delete_by_id(self, record_id: int) -> bool: ...
    async def save(self, record: Any) -> Any: ...


class SqlAlchemyStore:
    """
    PersistenceStore over one SQLAlchemy model.

    Args:
        model:   ORM class (must have an integer `id` primary key)
        session: Request-scoped AsyncSession
    """

    def __init__(self, model: Type[Base], session: AsyncSession):
        self.model = model
        self.session = session

    @property
    def table(self) -> str:
        return self.model.__tablename__

    @contextmanager
    def _translate_errors(self, operation: str, **context: Any) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            original = getattr(e, "orig", None) or e
            logger.error(
                "Store %s on '%s' failed: %s: %s",
                operation,
                self.table,
                type(e).__name__,
                original,
            )
            raise PersistenceError(
                message=f"{operation} on '{self.table}' failed: {original}",
                context={
                    "operation": operation,
                    "table": self.table,
                    "error_type": type(e).__name__,
                    **context,
                },
            ) from e

    async def find_all(self) -> List[Base]:
        """All records, ordered by id."""
        with self._translate_errors("find_all"):
            result = await self.session.execute(
                select(self.model).order_by(self.model.id)
            )
            return list(result.scalars().all())

    async def find_by_id(self, record_id: int) -> Optional[Base]:
        """The record with this id, or None."""
        with self._translate_errors("find_by_id", record_id=record_id):
            return await self.session.get(self.model, record_id)

    async def create(self, fields: Dict[str, Any]) -> Base:
        """Insert a new record; the database assigns `id` and `created_at`."""
        with self._translate_errors("create"):
            record = self.model(**fields)
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
            return record

    async def upsert(self, record_id: int, fields: Dict[str, Any]) -> Base:
        """
        Insert the record at `record_id`, or replace its fields if it exists.

        The identity always comes from `record_id`; an existing record keeps
        its `created_at`.
        """
        with self._translate_errors("upsert", record_id=record_id):
            record = await self.session.get(self.model, record_id)
            if record is None:
                record = self.model(**fields)
                record.id = record_id
                self.session.add(record)
            else:
                for key, value in fields.items():
                    setattr(record, key, value)
            await self.session.flush()
            await self.session.refresh(record)
            return record

    async def delete_by_id(self, record_id: int) -> bool:
        """Delete the record; returns False when there was nothing to delete."""
        with self._translate_errors("delete_by_id", record_id=record_id):
            record = await self.session.get(self.model, record_id)
            if record is None:
                return False
            await self.session.delete(record)
            await self.session.flush()
            return True

    async def save(self, record: Base) -> Base:
        """Persist in-memory changes to an already loaded record in one write."""
        with self._translate_errors("save", record_id=getattr(record, "id", None)):
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
            return record
