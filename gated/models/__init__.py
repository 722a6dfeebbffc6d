"""
Gated data models.

This package contains the Pydantic models for wardrobe, order tracking and
release-drop entities, plus the row and webhook shapes validated at the edge.
"""

# Carrier webhook models
from gated.models.carrier import (
    CarrierTrackingDetail,
    CarrierTrackingResponse,
    TrackingLocation,
    TrackingWebhookRequest,
)

# Drop models
from gated.models.drop import DropCreateRequest, DropEntity

# Garment models
from gated.models.garment import Category, GarmentCreateRequest, GarmentEntity

# Notice models
from gated.models.notice import Notice, NoticeLevel

# Order models
from gated.models.order import (
    ESTIMATE_CALCULATING,
    ESTIMATE_PENDING,
    ESTIMATE_UNKNOWN,
    SIMULATED_MARKER,
    Carrier,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderEntity,
    TrackingEvent,
    TrackingStatus,
)

# Store row models
from gated.models.rows import DropRow, GarmentRow, OrderRow, StoreRow

# Session models
from gated.models.session import SessionInfo, WebhookSettings

__all__ = [
    # Carrier webhook
    "CarrierTrackingDetail",
    "CarrierTrackingResponse",
    "TrackingLocation",
    "TrackingWebhookRequest",
    # Drop
    "DropCreateRequest",
    "DropEntity",
    # Garment
    "Category",
    "GarmentCreateRequest",
    "GarmentEntity",
    # Notice
    "Notice",
    "NoticeLevel",
    # Order
    "ESTIMATE_CALCULATING",
    "ESTIMATE_PENDING",
    "ESTIMATE_UNKNOWN",
    "SIMULATED_MARKER",
    "Carrier",
    "OrderCreateRequest",
    "OrderCreateResponse",
    "OrderEntity",
    "TrackingEvent",
    "TrackingStatus",
    # Session
    "SessionInfo",
    "WebhookSettings",
    # Rows
    "DropRow",
    "GarmentRow",
    "OrderRow",
    "StoreRow",
]
