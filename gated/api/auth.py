"""
Authentication and session dependencies for API routes.

Assumes an API gateway performs authentication and forwards
the user ID in the X-User-ID header.
"""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from gated.sync.session import Session, SessionRegistry
from gated.tracking.ingestor import TrackingIngestor
from gated.tracking.settings import LocalSettings


async def get_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-ID"),
) -> str:
    """
    Extract user ID from X-User-ID header.

    Raises:
        HTTPException: 401 if X-User-ID header is missing
        HTTPException: 400 if user ID is not a valid UUID format
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )

    try:
        UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-ID must be a valid UUID",
        )

    return x_user_id


def get_registry(request: Request) -> SessionRegistry:
    """Session registry created at startup."""
    return request.app.state.sessions


def get_local_settings(request: Request) -> LocalSettings:
    return request.app.state.settings


def get_ingestor(
    settings: LocalSettings = Depends(get_local_settings),
) -> TrackingIngestor:
    return TrackingIngestor(settings)


async def get_session(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> Session:
    """
    Active session for the calling user.

    Raises:
        HTTPException: 401 if the user has not signed in
    """
    session = registry.get(user_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No active session. POST /api/v1/session to sign in.",
        )
    return session
