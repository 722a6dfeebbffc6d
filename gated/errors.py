"""
Error types for the sync and tracking layers.

None of these are fatal to a session: callers turn them into notices.
"""

from typing import Optional

from pydantic import ValidationError


class GatedError(Exception):
    """Base class for sync-layer failures."""


class NetworkError(GatedError):
    """Transport failure or non-success status on an outbound call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SchemaError(GatedError):
    """A payload or row does not match its expected shape."""

    @classmethod
    def from_validation(cls, source: str, exc: ValidationError) -> "SchemaError":
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "<root>"
            for err in exc.errors()
        )
        return cls(f"{source} did not match expected shape ({fields})")
