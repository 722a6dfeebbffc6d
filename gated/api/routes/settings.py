"""
Local settings API routes.
"""

from fastapi import APIRouter, Depends

from gated.api.auth import get_local_settings
from gated.models.session import WebhookSettings
from gated.tracking.settings import LocalSettings

router = APIRouter()


@router.get("/settings/tracking-webhook", response_model=WebhookSettings)
async def get_webhook(
    settings: LocalSettings = Depends(get_local_settings),
) -> WebhookSettings:
    """Currently configured tracking endpoint."""
    return WebhookSettings(url=settings.webhook_url)


@router.put("/settings/tracking-webhook", response_model=WebhookSettings)
async def put_webhook(
    request: WebhookSettings,
    settings: LocalSettings = Depends(get_local_settings),
) -> WebhookSettings:
    """Set or clear the tracking endpoint; a missing scheme defaults to https."""
    return WebhookSettings(url=settings.set_webhook_url(request.url))
