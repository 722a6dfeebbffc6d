"""
Garment repository for database operations.
"""

from datetime import datetime, timezone

from sqlalchemy import Table

from gated.db.repositories.base import BaseRepository
from gated.db.tables import garments


class GarmentRepository(BaseRepository):
    """Repository for wardrobe rows."""

    @property
    def table(self) -> Table:
        return garments

    def _prepare(self, data: dict) -> dict:
        values = super()._prepare(data)
        if values.get("date_added") is None:
            values["date_added"] = datetime.now(timezone.utc)
        return values
