"""
Drop repository for database operations.
"""

from sqlalchemy import Table

from gated.db.repositories.base import BaseRepository
from gated.db.tables import drops


class DropRepository(BaseRepository):
    """Repository for release-drop rows."""

    @property
    def table(self) -> Table:
        return drops

    def _prepare(self, data: dict) -> dict:
        values = super()._prepare(data)
        if values.get("notified") is None:
            values["notified"] = False
        return values
