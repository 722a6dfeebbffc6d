from datetime import date
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(StrEnum):
    """Wardrobe categories"""

    TOPS = "Tops"
    BOTTOMS = "Bottoms"
    OUTERWEAR = "Outerwear"
    SHOES = "Shoes"
    ACCESSORIES = "Accessories"


class GarmentEntity(BaseModel):
    """A clothing item in the user's wardrobe."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "4b0d6c1e-1f4a-4d0c-9a56-2b0b6d1f2e11",
                "name": "Box Logo Hoodie",
                "brand": "Supreme",
                "category": "Tops",
                "color": "Heather Grey",
                "image_url": "https://picsum.photos/400/400?random=1",
                "date_added": "2023-10-15",
            }
        },
    )

    id: Optional[str] = Field(
        default=None, description="Temporary (tmp-*) or server-confirmed identifier"
    )
    name: str = Field(description="Display name")
    brand: str = Field(description="Brand name")
    category: Category = Field(description="Wardrobe category")
    color: str = Field(default="Multi", description="Color description")
    image_url: str = Field(description="Image URL or data URI")
    date_added: date = Field(
        default_factory=date.today, description="Acquisition date (no time component)"
    )


class GarmentCreateRequest(BaseModel):
    """Request body for adding a garment."""

    name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    category: Category
    color: Optional[str] = Field(default=None)
    image_url: str = Field(min_length=1)
    date_added: Optional[date] = Field(default=None)
