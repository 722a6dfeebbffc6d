"""
SQLAlchemy Table definitions for the Gated remote store.

Uses SQLAlchemy Core (not ORM); rows are handed to the sync layer as plain
dicts and normalized into Pydantic entities there.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB

metadata = MetaData()

JSONType = JSON().with_variant(JSONB, "postgresql")

# =============================================================================
# TABLE: garments
# =============================================================================

garments = Table(
    "garments",
    metadata,
    Column("id", Uuid(as_uuid=False), primary_key=True),
    Column("owner_id", Uuid(as_uuid=False), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("brand", String(255), nullable=False),
    Column("category", String(50), nullable=False),
    Column("image_url", Text, nullable=False),
    Column("date_added", DateTime(timezone=True)),
    Column("color", String(100)),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

# =============================================================================
# TABLE: orders
# =============================================================================

orders = Table(
    "orders",
    metadata,
    Column("id", Uuid(as_uuid=False), primary_key=True),
    Column("owner_id", Uuid(as_uuid=False), nullable=False, index=True),
    Column("tracking_number", String(100), nullable=False),
    Column("carrier", String(20), nullable=False),
    Column("item_name", String(255), nullable=False),
    Column("status", String(30), nullable=False),
    Column("estimated_delivery", DateTime(timezone=True)),
    # Tracking events, newest first (JSONB on Postgres)
    Column("history", JSONType, nullable=False, default=[]),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

# =============================================================================
# TABLE: drops
# =============================================================================

drops = Table(
    "drops",
    metadata,
    Column("id", Uuid(as_uuid=False), primary_key=True),
    Column("owner_id", Uuid(as_uuid=False), nullable=False, index=True),
    Column("brand", String(255), nullable=False),
    Column("name", String(255), nullable=False),
    Column("drop_datetime", DateTime(timezone=True), nullable=False),
    Column("image_url", Text),
    Column("notified", Boolean, nullable=False, default=False),
    Column("url", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
