"""
Repository implementations for the Gated remote store.

Repositories provide a clean interface for row-level operations,
encapsulating SQLAlchemy queries.
"""

from gated.db.repositories.drop import DropRepository
from gated.db.repositories.garment import GarmentRepository
from gated.db.repositories.order import OrderRepository

__all__ = [
    "DropRepository",
    "GarmentRepository",
    "OrderRepository",
]
