"""
Tracking ingestion for new orders.

Asks the user's configured webhook for live carrier status and normalizes the
answer into an OrderEntity. Whenever that is not possible (no endpoint,
transport error, bad status, unexpected body) it degrades to a simulated
record whose history carries the "(Simulated)" marker.

Per request: IDLE -> REQUESTING -> CONFIRMED | DEGRADED -> IDLE.
There is exactly one attempt per call; nothing is retried.
"""

import asyncio
import logging
from enum import StrEnum
from typing import Optional

import requests
from pydantic import BaseModel, Field

from gated.config import TRACKING_REQUEST_TIMEOUT
from gated.errors import NetworkError, SchemaError
from gated.models.carrier import CarrierTrackingResponse, TrackingWebhookRequest
from gated.models.notice import Notice, NoticeLevel
from gated.models.order import OrderCreateRequest, OrderEntity
from gated.sync import mappers
from gated.sync.result import Err, Ok, Result
from gated.utils.logging import json_fields
from gated.tracking.settings import LocalSettings

logger = logging.getLogger(__name__)

DEGRADED_NOTICE = (
    "Could not reach tracking webhook. Adding order with simulated data."
)


class IngestState(StrEnum):
    """Tracking request lifecycle"""

    IDLE = "idle"
    REQUESTING = "requesting"
    CONFIRMED = "confirmed"  # Live data from the webhook
    DEGRADED = "degraded"  # Simulated record


_TRANSITIONS = {
    IngestState.IDLE: {IngestState.REQUESTING, IngestState.DEGRADED},
    IngestState.REQUESTING: {IngestState.CONFIRMED, IngestState.DEGRADED},
    IngestState.CONFIRMED: {IngestState.IDLE},
    IngestState.DEGRADED: {IngestState.IDLE},
}


class TrackingResult(BaseModel):
    """Outcome of one tracking request"""

    order: OrderEntity = Field(description="Order record, without a collection id")
    state: IngestState = Field(description="CONFIRMED or DEGRADED")
    notice: Optional[Notice] = Field(
        default=None, description="One-time notice when live tracking failed"
    )

    @property
    def simulated(self) -> bool:
        return self.state is IngestState.DEGRADED


class _RequestLifecycle:
    """State machine for a single tracking request."""

    def __init__(self, tracking_number: str):
        self.tracking_number = tracking_number
        self.state = IngestState.IDLE

    def advance(self, state: IngestState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid tracking transition {self.state} -> {state}")
        logger.debug("Tracking %s: %s -> %s", self.tracking_number, self.state, state)
        self.state = state


class TrackingIngestor:
    """Builds order records from the configured tracking webhook."""

    def __init__(
        self,
        settings: LocalSettings,
        timeout: float = TRACKING_REQUEST_TIMEOUT,
    ):
        self.settings = settings
        self.timeout = timeout

    async def ingest(self, request: OrderCreateRequest) -> TrackingResult:
        """
        Fetch (or simulate) the order record for a tracking number.

        Never raises for network or payload problems; those end in DEGRADED.

        Args:
            request: Carrier, tracking number and item description

        Returns:
            TrackingResult with the order and how it was obtained
        """
        lifecycle = _RequestLifecycle(request.tracking_number)
        url = self.settings.webhook_url

        if not url:
            logger.warning("No webhook URL configured. Using simulated tracking data.")
            lifecycle.advance(IngestState.DEGRADED)
            result = TrackingResult(
                order=self._simulate(request), state=IngestState.DEGRADED
            )
            lifecycle.advance(IngestState.IDLE)
            return result

        lifecycle.advance(IngestState.REQUESTING)
        fetched = await self._fetch(url, request)

        if isinstance(fetched, Err):
            logger.warning(
                "Tracking webhook failed for %s: %s",
                request.tracking_number,
                fetched.reason,
                extra=json_fields(
                    carrier=request.carrier.value,
                    error_type=type(fetched.error).__name__,
                    status_code=getattr(fetched.error, "status_code", None),
                ),
            )
            lifecycle.advance(IngestState.DEGRADED)
            result = TrackingResult(
                order=self._simulate(request),
                state=IngestState.DEGRADED,
                notice=Notice(
                    level=NoticeLevel.WARNING,
                    message=DEGRADED_NOTICE,
                    entity_kind="orders",
                ),
            )
        else:
            lifecycle.advance(IngestState.CONFIRMED)
            result = TrackingResult(
                order=mappers.order_from_tracking(
                    request.carrier,
                    request.tracking_number,
                    request.item_name,
                    fetched.value,
                ),
                state=IngestState.CONFIRMED,
            )
            logger.info(
                "Tracking confirmed for %s: %s",
                request.tracking_number,
                result.order.status,
            )

        lifecycle.advance(IngestState.IDLE)
        return result

    async def _fetch(self, url: str, request: OrderCreateRequest) -> Result:
        """Single POST to the webhook, folded into Ok(response) or Err."""
        body = TrackingWebhookRequest(
            carrier=request.carrier, tracking_number=request.tracking_number
        ).model_dump(mode="json", by_alias=True)

        try:
            response = await asyncio.to_thread(
                requests.post, url, json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            return Err(NetworkError(f"Could not reach tracking webhook: {e}"))

        if not response.ok:
            return Err(
                NetworkError(
                    f"Webhook error: {response.status_code} {response.reason}",
                    status_code=response.status_code,
                )
            )

        try:
            payload = response.json()
        except ValueError:
            return Err(SchemaError("tracking response is not valid JSON"))

        try:
            parsed: CarrierTrackingResponse = mappers.parse_tracking_response(payload)
        except SchemaError as e:
            return Err(e)
        return Ok(parsed)

    @staticmethod
    def _simulate(request: OrderCreateRequest) -> OrderEntity:
        return mappers.simulated_order(
            request.carrier, request.tracking_number, request.item_name
        )
