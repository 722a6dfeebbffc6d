"""
Runtime configuration.

Values come from the environment (a local .env file is loaded by the API at
startup).
"""

import os
from pathlib import Path

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"

DEFAULT_SETTINGS_PATH = Path.home() / ".gated" / "settings.json"

# Key under which the tracking webhook URL is persisted in local settings
TRACKING_WEBHOOK_KEY = "gated_tracking_webhook"

# Single attempt per user action; this only bounds how long that attempt waits
TRACKING_REQUEST_TIMEOUT = float(os.getenv("TRACKING_REQUEST_TIMEOUT", "15"))


def get_settings_path() -> Path:
    """Location of the local settings file."""
    return Path(os.getenv("GATED_SETTINGS_PATH", str(DEFAULT_SETTINGS_PATH)))
