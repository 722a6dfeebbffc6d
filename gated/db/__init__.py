"""
Gated Database Module.

Provides connection management, repositories and the async remote store used
by the sync layer. Uses SQLAlchemy Core.
"""

from gated.db.connection import DatabaseConnection
from gated.db.remote_store import RemoteStore, SqlRemoteStore
from gated.db.unit_of_work import UnitOfWork

__all__ = ["DatabaseConnection", "RemoteStore", "SqlRemoteStore", "UnitOfWork"]
