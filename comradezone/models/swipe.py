"""Swipe models for the ComradeZone dating service."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from comradezone.models.profile import ProfileSummary


class SwipeType(str, Enum):
    """
    Swipe type enumeration.

    The directional action one profile takes toward another.
    """

    LIKE = "LIKE"
    PASS = "PASS"
    SUPER_LIKE = "SUPER_LIKE"

    @property
    def is_positive(self) -> bool:
        """LIKE and SUPER_LIKE count toward a match, PASS does not."""
        return self is not SwipeType.PASS


class SwipeRequest(BaseModel):
    """Swipe submission payload."""

    target_id: str = Field(..., min_length=1)
    type: SwipeType


class SwipeResult(BaseModel):
    """Outcome of recording a swipe."""

    matched: bool = False
    match_id: str | None = None


class IncomingLike(BaseModel):
    """A profile that liked the viewer and is still waiting for a response."""

    profile: ProfileSummary
    is_super_like: bool
    liked_at: datetime
