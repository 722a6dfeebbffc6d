"""
Asynchronous remote store interface.

The sync layer awaits these calls; the SQL implementation runs the blocking
SQLAlchemy work in a worker thread so the event loop stays free.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError

from gated.db.unit_of_work import UnitOfWork
from gated.errors import NetworkError

logger = logging.getLogger(__name__)


class RemoteStore(ABC):
    """Row-level access to the remote store, one table per entity family."""

    @abstractmethod
    async def insert(self, table: str, row: dict) -> dict:
        """Insert row and return it with its server-assigned id."""

    @abstractmethod
    async def delete(self, table: str, entity_id: str) -> None:
        """Delete the row with entity_id; deleting a missing row is not an error."""

    @abstractmethod
    async def select(self, table: str, owner_id: str) -> list[dict]:
        """All rows owned by owner_id, newest first."""


class SqlRemoteStore(RemoteStore):
    """RemoteStore backed by the SQLAlchemy repositories."""

    async def insert(self, table: str, row: dict) -> dict:
        return await asyncio.to_thread(self._insert, table, row)

    async def delete(self, table: str, entity_id: str) -> None:
        await asyncio.to_thread(self._delete, table, entity_id)

    async def select(self, table: str, owner_id: str) -> list[dict]:
        return await asyncio.to_thread(self._select, table, owner_id)

    def _insert(self, table: str, row: dict) -> dict:
        try:
            with UnitOfWork() as uow:
                created = uow.repository(table).insert(row)
                uow.commit()
                return created
        except (SQLAlchemyError, RuntimeError) as e:
            raise NetworkError(f"Insert into {table} failed: {e}") from e

    def _delete(self, table: str, entity_id: str) -> None:
        try:
            with UnitOfWork() as uow:
                deleted = uow.repository(table).delete_by_id(entity_id)
                uow.commit()
        except (SQLAlchemyError, RuntimeError) as e:
            raise NetworkError(f"Delete from {table} failed: {e}") from e

        if not deleted:
            logger.info("Delete from %s: %s was already gone", table, entity_id)

    def _select(self, table: str, owner_id: str) -> list[dict]:
        try:
            with UnitOfWork() as uow:
                return uow.repository(table).list_for_owner(owner_id)
        except (SQLAlchemyError, RuntimeError) as e:
            raise NetworkError(f"Select from {table} failed: {e}") from e
