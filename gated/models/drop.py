import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DROP_TIME = "12:00 PM EST"
DEFAULT_DROP_IMAGE = "https://picsum.photos/400/400?blur=5"


class DropEntity(BaseModel):
    """An upcoming product release the user is following."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(
        default=None, description="Temporary (tmp-*) or server-confirmed identifier"
    )
    brand: str = Field(description="Releasing brand")
    name: str = Field(description="Release name")
    date: datetime.date = Field(description="Release date")
    time: str = Field(
        default=DEFAULT_DROP_TIME,
        description="Release time with its timezone baked in as text",
    )
    image_url: str = Field(default=DEFAULT_DROP_IMAGE, description="Image URL")
    notified: bool = Field(default=True, description="User wants a reminder")
    url: Optional[str] = Field(default=None, description="External product URL")


class DropCreateRequest(BaseModel):
    """Request body for following a drop."""

    brand: Optional[str] = Field(default=None)
    name: str = Field(min_length=1)
    date: datetime.date
    time: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None)
