"""
Logging configuration.

Locally, logs go to stdout with any `json_fields` extra appended as JSON.
On Cloud Run (K_SERVICE set) logs are routed through google-cloud-logging,
which picks `json_fields` up as structured payload.
"""

import json
import logging
import os
import sys
from typing import Any

# Libraries that log every request/statement at INFO
QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine", "httpx")

_logging_configured = False


def json_fields(**fields: Any) -> dict:
    """
    Build the `extra` mapping for a structured log line.

    Usage:
        logger.warning("Insert failed", extra=json_fields(table="garments", id=tmp_id))
    """
    return {"json_fields": {k: v for k, v in fields.items() if v is not None}}


class LocalFormatter(logging.Formatter):
    """Appends a record's json_fields, if any, below the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        fields = getattr(record, "json_fields", None)
        if fields:
            rendered = json.dumps(fields, indent=2, default=str, sort_keys=True)
            message = f"{message}\n{rendered}"

        return message


def setup_logging(service_name: str = "gated", level: int | None = None):
    """
    Configure root logging once per process.

    Args:
        service_name: Name of the service for log identification
        level: Root log level; defaults to LOG_LEVEL from the environment or INFO
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    if os.getenv("K_SERVICE"):
        _setup_cloud_logging(service_name, level)
    else:
        _setup_local_logging(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _logging_configured = True


def _setup_cloud_logging(service_name: str, level: int):
    try:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=level)

        logging.info("Cloud Logging configured for service: %s", service_name)
    except Exception as e:
        # Credentials or the optional gcp extra are missing
        _setup_local_logging(level)
        logging.warning("Failed to setup Cloud Logging, using local logging: %s", e)


def _setup_local_logging(level: int):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        LocalFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
