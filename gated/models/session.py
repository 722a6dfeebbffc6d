from typing import Optional

from pydantic import BaseModel, Field


class SessionInfo(BaseModel):
    """Snapshot of a signed-in user's session."""

    owner_id: str = Field(description="Signed-in user")
    epoch: int = Field(description="Session generation")
    garments: int = Field(description="Garments in the wardrobe")
    orders: int = Field(description="Tracked orders")
    drops: int = Field(description="Followed drops")
    pending: int = Field(description="Remote calls still in flight")


class WebhookSettings(BaseModel):
    """Tracking webhook configuration."""

    url: Optional[str] = Field(
        default=None, description="Endpoint URL; empty or null disables live tracking"
    )
