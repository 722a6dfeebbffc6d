"""
Remote store row shapes.

These models are the validation boundary for rows read from the store:
anything that does not parse here never reaches the sync layer.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StoreRow(BaseModel):
    """Fields shared by every store row."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Server-assigned identifier")
    owner_id: Optional[str] = Field(default=None, description="Owning user")

    @field_validator("id", "owner_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        # Stores hand back UUID or integer keys
        if value is None or isinstance(value, str):
            return value
        return str(value)


class GarmentRow(StoreRow):
    name: str
    brand: str
    category: str
    image_url: str
    date_added: Optional[datetime] = None
    color: Optional[str] = None


class OrderRow(StoreRow):
    tracking_number: str
    carrier: str
    item_name: str
    status: str
    estimated_delivery: Optional[datetime] = None
    history: Optional[list[dict[str, Any]]] = None


class DropRow(StoreRow):
    brand: str
    name: str
    drop_datetime: datetime
    image_url: Optional[str] = None
    notified: bool = False
    url: Optional[str] = None
