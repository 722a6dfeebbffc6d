from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gated.models.notice import Notice

# Marker carried by the synthesized event of a simulated order
SIMULATED_MARKER = "(Simulated)"

# Display sentinels for estimated delivery
ESTIMATE_PENDING = "Pending"
ESTIMATE_CALCULATING = "Calculating..."
ESTIMATE_UNKNOWN = "Unknown"

ESTIMATE_SENTINELS = frozenset(
    {ESTIMATE_PENDING, ESTIMATE_CALCULATING, ESTIMATE_UNKNOWN}
)


class Carrier(StrEnum):
    """Supported shipping carriers"""

    USPS = "USPS"
    UPS = "UPS"
    FEDEX = "FedEx"


class TrackingStatus(StrEnum):
    """Shipment tracking status"""

    PRE_TRANSIT = "Pre-Transit"  # Label created, not yet scanned
    IN_TRANSIT = "In Transit"  # Moving through the carrier network
    OUT_FOR_DELIVERY = "Out for Delivery"  # On the truck
    DELIVERED = "Delivered"  # Package delivered



class TrackingEvent(BaseModel):
    """Individual tracking event, rendered as an opaque log line"""

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="Event date (display string)")
    location: str = Field(default="Unknown", description="Event location")
    description: str = Field(description="Event description")


class OrderEntity(BaseModel):
    """
    A tracked shipment.

    History is ordered newest first and always holds at least one event.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(
        default=None, description="Temporary (tmp-*) or server-confirmed identifier"
    )
    carrier: Carrier = Field(description="Shipping carrier")
    tracking_number: str = Field(description="Carrier tracking number")
    item_name: str = Field(description="What is in the package")
    status: TrackingStatus = Field(
        default=TrackingStatus.PRE_TRANSIT, description="Current status"
    )
    estimated_delivery: str = Field(
        default=ESTIMATE_PENDING,
        description="Human-readable date or a sentinel such as 'Pending'",
    )
    history: list[TrackingEvent] = Field(
        min_length=1, description="Tracking events, newest first"
    )

    @property
    def is_simulated(self) -> bool:
        """True when the record was synthesized instead of fetched live."""
        return any(SIMULATED_MARKER in event.description for event in self.history)


class OrderCreateRequest(BaseModel):
    """Request body for tracking a new order."""

    carrier: Carrier = Field(default=Carrier.UPS)
    tracking_number: str = Field(min_length=1)
    item_name: str = Field(min_length=1)


class OrderCreateResponse(BaseModel):
    """Response for tracking a new order."""

    order: OrderEntity = Field(description="Order as added to the collection")
    simulated: bool = Field(description="True when live tracking was unavailable")
    notice: Optional[Notice] = Field(
        default=None, description="One-time notice to show the user"
    )
