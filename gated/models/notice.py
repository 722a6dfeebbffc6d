from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class NoticeLevel(StrEnum):
    """Severity of a user-facing notice"""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """Transient, non-fatal message surfaced to the user once."""

    level: NoticeLevel = Field(default=NoticeLevel.WARNING)
    message: str = Field(description="Human-readable message")
    entity_kind: Optional[str] = Field(
        default=None, description="Collection the notice relates to"
    )
    entity_id: Optional[str] = Field(default=None, description="Affected entity")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the notice was raised",
    )
