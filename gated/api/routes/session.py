"""
Session API routes.

Signing in opens the user's optimistic cache and loads it from the store;
signing out clears it and discards any results still in flight.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from gated.api.auth import get_registry, get_session, get_user_id
from gated.models.notice import Notice
from gated.models.session import SessionInfo
from gated.sync.session import Session, SessionRegistry

router = APIRouter()


def _session_info(session: Session) -> SessionInfo:
    return SessionInfo(
        owner_id=session.owner_id,
        epoch=session.epoch,
        garments=len(session.garments),
        orders=len(session.orders),
        drops=len(session.drops),
        pending=session.coordinator.pending,
    )


@router.post("/session", response_model=SessionInfo)
async def sign_in(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionInfo:
    """Start (or resume) the caller's session and load its collections."""
    session = await registry.start(user_id)
    return _session_info(session)


@router.get("/session", response_model=SessionInfo)
async def get_session_info(session: Session = Depends(get_session)) -> SessionInfo:
    """Describe the caller's active session."""
    return _session_info(session)


@router.delete("/session", status_code=204)
async def sign_out(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> Response:
    """
    End the caller's session.

    Raises:
        404: No active session
    """
    if not registry.end(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active session",
        )
    return Response(status_code=204)


@router.post("/session/refresh", response_model=SessionInfo)
async def refresh(session: Session = Depends(get_session)) -> SessionInfo:
    """Reload every collection from the store."""
    await session.coordinator.refresh()
    return _session_info(session)


@router.get("/notices", response_model=list[Notice])
async def drain_notices(session: Session = Depends(get_session)) -> list[Notice]:
    """Pending notices; each is returned once."""
    return session.drain_notices()
