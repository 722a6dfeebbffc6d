"""
Client-local settings persisted as a small JSON document.

Only one key matters today: the tracking webhook URL.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from gated.config import TRACKING_WEBHOOK_KEY, get_settings_path

logger = logging.getLogger(__name__)

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def normalize_webhook_url(url: str) -> str:
    """Trim and default the scheme to https; empty input stays empty."""
    url = (url or "").strip()
    if url and not _SCHEME_PATTERN.match(url):
        url = f"https://{url}"
    return url


class LocalSettings:
    """Key/value settings stored in a JSON file."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else get_settings_path()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @property
    def webhook_url(self) -> Optional[str]:
        """Configured tracking endpoint, or None when tracking must degrade."""
        url = self.get(TRACKING_WEBHOOK_KEY)
        return url or None

    def set_webhook_url(self, url: Optional[str]) -> Optional[str]:
        """
        Persist the tracking endpoint.

        Args:
            url: Endpoint URL; blank clears the setting

        Returns:
            The stored URL, or None if cleared
        """
        normalized = normalize_webhook_url(url or "")
        self.set(TRACKING_WEBHOOK_KEY, normalized or None)
        logger.info("Tracking webhook %s", "configured" if normalized else "cleared")
        return normalized or None
