"""Models package for the ComradeZone dating service."""

from comradezone.models.match import Match, MatchThread, MatchView, Message, MessageRequest, canonical_pair
from comradezone.models.profile import (
    Gender,
    Photo,
    Profile,
    ProfileInput,
    ProfileSummary,
    Prompt,
    RelationshipGoal,
)
from comradezone.models.safety import Block, BlockRequest, Report, ReportReason, ReportRequest
from comradezone.models.swipe import IncomingLike, SwipeRequest, SwipeResult, SwipeType

__all__ = [
    "Block",
    "BlockRequest",
    "Gender",
    "IncomingLike",
    "Match",
    "MatchThread",
    "MatchView",
    "Message",
    "MessageRequest",
    "Photo",
    "Profile",
    "ProfileInput",
    "ProfileSummary",
    "Prompt",
    "RelationshipGoal",
    "Report",
    "ReportReason",
    "ReportRequest",
    "SwipeRequest",
    "SwipeResult",
    "SwipeType",
    "canonical_pair",
]
