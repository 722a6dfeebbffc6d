"""
Carrier tracking ingestion.

Turns a carrier + tracking number into an order record, live from the user's
webhook when possible and simulated otherwise.
"""

from gated.tracking.ingestor import IngestState, TrackingIngestor, TrackingResult
from gated.tracking.settings import LocalSettings, normalize_webhook_url

__all__ = [
    "IngestState",
    "LocalSettings",
    "TrackingIngestor",
    "TrackingResult",
    "normalize_webhook_url",
]
