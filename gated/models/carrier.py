"""
Carrier webhook payload models.

The webhook is expected to answer with an EasyPost-style tracker document.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from gated.models.order import Carrier


class TrackingLocation(BaseModel):
    """Where a tracking scan happened"""

    city: Optional[str] = None
    state: Optional[str] = None


class CarrierTrackingDetail(BaseModel):
    """One scan in the provider's chronological event list"""

    occurred_at: datetime = Field(alias="datetime", description="Scan timestamp")
    tracking_location: Optional[TrackingLocation] = None
    message: Optional[str] = None
    status: Optional[str] = None


class CarrierTrackingResponse(BaseModel):
    """Response body of the tracking webhook"""

    status: str = Field(description="Provider status vocabulary, e.g. 'in_transit'")
    est_delivery_date: Optional[str] = None
    estimated_delivery_date: Optional[str] = None
    tracking_details: list[CarrierTrackingDetail] = Field(
        default_factory=list, description="Events, oldest first"
    )

    @field_validator("tracking_details", mode="before")
    @classmethod
    def _null_details(cls, value):
        return [] if value is None else value


class TrackingWebhookRequest(BaseModel):
    """Body POSTed to the tracking webhook"""

    carrier: Carrier
    tracking_number: str = Field(serialization_alias="trackingNumber")
