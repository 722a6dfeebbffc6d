"""
Unit of Work for store transactions.

One SQLAlchemy session per unit; repositories are created lazily on it and
addressed by table name, which is how the remote store refers to them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gated.db.connection import DatabaseConnection
from gated.db.repositories.base import BaseRepository
from gated.db.repositories.drop import DropRepository
from gated.db.repositories.garment import GarmentRepository
from gated.db.repositories.order import OrderRepository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

REPOSITORIES: dict[str, type[BaseRepository]] = {
    "garments": GarmentRepository,
    "orders": OrderRepository,
    "drops": DropRepository,
}


class UnitOfWork:
    """
    Transaction scope over the garment, order and drop repositories.

    Usage:
        with UnitOfWork() as uow:
            row = uow.repository("garments").insert(row)
            uow.commit()

    Leaving the block with an exception rolls back; leaving it without
    commit() discards the work.
    """

    def __init__(self):
        self._session: Session | None = None
        self._repositories: dict[str, BaseRepository] = {}

    def __enter__(self) -> UnitOfWork:
        self._session = DatabaseConnection.get_session()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        self._close()
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork must be used within a context manager")
        return self._session

    def repository(self, table_name: str) -> BaseRepository:
        """Repository for 'garments', 'orders' or 'drops'."""
        if table_name not in REPOSITORIES:
            raise KeyError(f"Unknown table: {table_name}")
        if table_name not in self._repositories:
            self._repositories[table_name] = REPOSITORIES[table_name](self.session)
        return self._repositories[table_name]

    @property
    def garments(self) -> GarmentRepository:
        return self.repository("garments")

    @property
    def orders(self) -> OrderRepository:
        return self.repository("orders")

    @property
    def drops(self) -> DropRepository:
        return self.repository("drops")

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def _close(self):
        if self._session is not None:
            self._session.close()
            self._session = None
            self._repositories = {}
