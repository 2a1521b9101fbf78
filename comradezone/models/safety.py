"""Block and report models for the ComradeZone dating service."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReportReason(str, Enum):
    """Reasons a profile can be reported for."""

    INAPPROPRIATE_CONTENT = "inappropriate_content"
    HARASSMENT = "harassment"
    SPAM = "spam"
    FAKE_PROFILE = "fake_profile"
    UNDERAGE = "underage"
    OTHER = "other"


class Block(BaseModel):
    """Directional block: `blocker_id` no longer sees or matches `blocked_id`."""

    blocker_id: str
    blocked_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BlockRequest(BaseModel):
    blocked_id: str = Field(..., min_length=1)


class Report(BaseModel):
    """Represents a profile report record."""

    id: str
    reporter_id: str
    reported_id: str
    reason: ReportReason
    details: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "f47ac10b-58cc-4372-a567-0e02b2c3d479",
                "reporter_id": "profile_abc_123",
                "reported_id": "profile_def_456",
                "reason": "spam",
                "details": "Sends the same link to everyone",
                "created_at": "2026-03-02T10:00:00Z",
            }
        },
    )


class ReportRequest(BaseModel):
    """Report submission payload."""

    reported_id: str = Field(..., min_length=1)
    reason: ReportReason
    details: Optional[str] = Field(default=None, max_length=1000)
