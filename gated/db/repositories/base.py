"""
Base repository with common row operations.

Repositories speak in store row dicts (the remote row shapes); conversion to
entities happens in the sync layer's mappers.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import Table, delete, select
from sqlalchemy.orm import Session


class BaseRepository(ABC):
    """
    Base repository with common insert/delete/select operations.

    Subclasses must implement:
    - table property: Return the SQLAlchemy Table
    Subclasses may extend:
    - _prepare: Fill column defaults before insert
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    @abstractmethod
    def table(self) -> Table:
        """SQLAlchemy table for this repository."""
        pass

    def _prepare(self, data: dict) -> dict:
        """Keep known columns and assign server-side id and timestamps."""
        columns = set(self.table.c.keys())
        values = {key: value for key, value in data.items() if key in columns}
        if not values.get("id"):
            values["id"] = str(uuid4())
        values.setdefault("created_at", datetime.now(timezone.utc))
        return values

    def _row_to_dict(self, row: Any) -> dict:
        """Convert database row to a plain store row."""
        return dict(row._mapping)

    def insert(self, data: dict) -> dict:
        """
        Insert a new row.

        Args:
            data: Persisted fields; id is generated when absent

        Returns:
            Created row including server-generated fields
        """
        stmt = self.table.insert().values(**self._prepare(data)).returning(self.table)
        row = self.session.execute(stmt).fetchone()
        return self._row_to_dict(row)

    def delete_by_id(self, id: str) -> bool:
        """
        Delete row by ID.

        Args:
            id: UUID of the row

        Returns:
            True if a row was deleted, False if not found
        """
        stmt = delete(self.table).where(self.table.c.id == id)
        result = self.session.execute(stmt)
        return result.rowcount > 0

    def list_for_owner(self, owner_id: str, limit: int = 500) -> list[dict]:
        """
        Get rows owned by a user, newest first.

        Args:
            owner_id: Owning user ID
            limit: Maximum number of rows

        Returns:
            List of row dicts
        """
        stmt = (
            select(self.table)
            .where(self.table.c.owner_id == owner_id)
            .order_by(self.table.c.created_at.desc())
            .limit(limit)
        )
        result = self.session.execute(stmt)
        return [self._row_to_dict(row) for row in result.fetchall()]
