"""
Release-drop API routes.
"""

from fastapi import APIRouter, Depends, Response

from gated.api.auth import get_session
from gated.models.drop import (
    DEFAULT_DROP_IMAGE,
    DEFAULT_DROP_TIME,
    DropCreateRequest,
    DropEntity,
)
from gated.sync.session import Session

router = APIRouter()


@router.get("/drops", response_model=list[DropEntity])
async def list_drops(session: Session = Depends(get_session)) -> list[DropEntity]:
    """List followed drops, newest first."""
    return list(session.drops)


@router.post("/drops", response_model=DropEntity, status_code=202)
async def add_drop(
    request: DropCreateRequest,
    session: Session = Depends(get_session),
) -> DropEntity:
    """Follow a drop; the reminder flag starts on."""
    drop = DropEntity(
        brand=request.brand or "Unknown Brand",
        name=request.name,
        date=request.date,
        time=request.time or DEFAULT_DROP_TIME,
        image_url=request.image_url or DEFAULT_DROP_IMAGE,
        notified=True,
        url=request.url or None,
    )
    session.coordinator.drops.create(drop)
    return session.drops[0]


@router.delete("/drops/{drop_id}", status_code=204)
async def delete_drop(
    drop_id: str,
    session: Session = Depends(get_session),
) -> Response:
    """Stop following a drop; removing an unknown id is a no-op."""
    session.coordinator.drops.delete(drop_id)
    return Response(status_code=204)
