"""Match and message models for the ComradeZone dating service."""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from comradezone.models.profile import ProfileSummary


def canonical_pair(profile_a: str, profile_b: str) -> Tuple[str, str]:
    """Order a pair of profile ids the way matches are stored (smaller id first)."""
    return (profile_a, profile_b) if profile_a < profile_b else (profile_b, profile_a)


class Match(BaseModel):
    """
    Match model.

    The mutual-interest relationship between two profiles. Deactivated rather
    than deleted when either party unmatches or blocks.
    """

    id: str
    profile1_id: str
    profile2_id: str
    is_active: bool = True
    matched_at: datetime
    last_message_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def involves(self, profile_id: str) -> bool:
        """Whether the profile is one of the two parties."""
        return profile_id in (self.profile1_id, self.profile2_id)

    def other_party(self, profile_id: str) -> str:
        """Return the id of the profile on the other side of the match."""
        return self.profile2_id if self.profile1_id == profile_id else self.profile1_id


class Message(BaseModel):
    """A message inside a match thread."""

    id: str
    match_id: str
    sender_id: str
    content: str
    is_read: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageRequest(BaseModel):
    """Message submission payload."""

    content: str = Field(..., min_length=1)


class MatchView(BaseModel):
    """
    Match list entry.

    Shows the other party of a match together with thread metadata.
    """

    match_id: str
    profile: ProfileSummary
    matched_at: datetime
    last_message_at: Optional[datetime] = None
    last_message: Optional[Message] = None


class MatchThread(BaseModel):
    """A match together with the other party and its messages."""

    match: Match
    other_profile: ProfileSummary
    messages: list[Message] = Field(default_factory=list)
