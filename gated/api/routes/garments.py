"""
Wardrobe API routes.

Creates and deletes are optimistic: the response reflects the local
collection immediately while the store write completes in the background.
"""

from fastapi import APIRouter, Depends, Response

from gated.api.auth import get_session
from gated.models.garment import GarmentCreateRequest, GarmentEntity
from gated.sync.mappers import today
from gated.sync.session import Session

router = APIRouter()


@router.get("/garments", response_model=list[GarmentEntity])
async def list_garments(session: Session = Depends(get_session)) -> list[GarmentEntity]:
    """List the wardrobe, newest first."""
    return list(session.garments)


@router.post("/garments", response_model=GarmentEntity, status_code=202)
async def add_garment(
    request: GarmentCreateRequest,
    session: Session = Depends(get_session),
) -> GarmentEntity:
    """
    Add a garment.

    Returns the entity with its temporary id; the server id replaces it once
    the store confirms the insert.
    """
    garment = GarmentEntity(
        name=request.name,
        brand=request.brand,
        category=request.category,
        color=request.color or "Multi",
        image_url=request.image_url,
        date_added=request.date_added or today(),
    )
    session.coordinator.garments.create(garment)
    return session.garments[0]


@router.delete("/garments/{garment_id}", status_code=204)
async def delete_garment(
    garment_id: str,
    session: Session = Depends(get_session),
) -> Response:
    """Remove a garment; removing an unknown id is a no-op."""
    session.coordinator.garments.delete(garment_id)
    return Response(status_code=204)
