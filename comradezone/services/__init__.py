"""Services package for the ComradeZone dating service."""

from comradezone.services.matching_service import (
    detect_and_create_match,
    get_match,
    list_candidates,
    list_matches,
    unmatch,
)
from comradezone.services.message_service import get_match_messages, send_message
from comradezone.services.profile_service import (
    add_photo,
    browse_profiles,
    compute_completeness,
    delete_photo,
    get_profile,
    get_profile_for_account,
    set_visibility,
    upsert_profile,
)
from comradezone.services.safety_service import block_profile, report_profile
from comradezone.services.swipe_service import list_incoming_likes, record_swipe, super_likes_remaining

__all__ = [
    "add_photo",
    "block_profile",
    "browse_profiles",
    "compute_completeness",
    "delete_photo",
    "detect_and_create_match",
    "get_match",
    "get_match_messages",
    "get_profile",
    "get_profile_for_account",
    "list_candidates",
    "list_incoming_likes",
    "list_matches",
    "record_swipe",
    "report_profile",
    "send_message",
    "set_visibility",
    "super_likes_remaining",
    "unmatch",
    "upsert_profile",
]
