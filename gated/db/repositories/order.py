"""
Order repository for database operations.

Handles tracked-order rows with their JSON tracking history.
"""

from sqlalchemy import Table

from gated.db.repositories.base import BaseRepository
from gated.db.tables import orders


class OrderRepository(BaseRepository):
    """Repository for tracked-order rows."""

    @property
    def table(self) -> Table:
        return orders

    def _prepare(self, data: dict) -> dict:
        values = super()._prepare(data)
        if values.get("history") is None:
            values["history"] = []
        return values
