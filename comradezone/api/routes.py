"""HTTP routes for the dating engine.

Authentication is handled upstream; handlers receive the acting profile id
in the path and delegate straight to the service layer.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel

from comradezone.models.match import Match, MatchThread, MatchView, Message, MessageRequest
from comradezone.models.profile import Photo, Profile, ProfileInput, ProfileSummary
from comradezone.models.safety import Block, BlockRequest, Report, ReportRequest
from comradezone.models.swipe import IncomingLike, SwipeRequest, SwipeResult
from comradezone.services import (
    matching_service,
    message_service,
    profile_service,
    safety_service,
    swipe_service,
)
from comradezone.utils.logging import bind_request_context


async def bind_profile_context(request: Request) -> None:
    """Tag log lines with the acting profile when the route has one."""
    bind_request_context(profile_id=request.path_params.get("profile_id"))


router = APIRouter(tags=["Dating"], dependencies=[Depends(bind_profile_context)])


class VisibilityRequest(BaseModel):
    show_me: bool


class PhotoRequest(BaseModel):
    url: str
    is_main: bool = False


class QuotaResponse(BaseModel):
    super_likes_remaining: int


@router.put("/accounts/{account_id}/profile", response_model=Profile)
def upsert_profile(account_id: str, payload: ProfileInput) -> Profile:
    return profile_service.upsert_profile(account_id, payload)


@router.get("/accounts/{account_id}/profile", response_model=Profile)
def get_account_profile(account_id: str) -> Profile:
    return profile_service.get_profile_for_account(account_id)


@router.get("/profiles/{profile_id}", response_model=Profile)
def get_profile(profile_id: str) -> Profile:
    return profile_service.get_profile(profile_id)


@router.patch("/profiles/{profile_id}/visibility", response_model=Profile)
def set_visibility(profile_id: str, payload: VisibilityRequest) -> Profile:
    return profile_service.set_visibility(profile_id, payload.show_me)


@router.post("/profiles/{profile_id}/photos", response_model=Photo, status_code=201)
def add_photo(profile_id: str, payload: PhotoRequest) -> Photo:
    return profile_service.add_photo(profile_id, payload.url, payload.is_main)


@router.delete("/profiles/{profile_id}/photos/{photo_id}", status_code=204)
def delete_photo(profile_id: str, photo_id: str) -> Response:
    profile_service.delete_photo(profile_id, photo_id)
    return Response(status_code=204)


@router.get("/browse", response_model=List[ProfileSummary])
def browse_profiles(limit: Optional[int] = Query(default=None, ge=1)) -> List[ProfileSummary]:
    return profile_service.browse_profiles(limit)


@router.get("/profiles/{profile_id}/candidates", response_model=List[ProfileSummary])
def list_candidates(profile_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> List[ProfileSummary]:
    return matching_service.list_candidates(profile_id, limit)


@router.post("/profiles/{profile_id}/swipes", response_model=SwipeResult)
def record_swipe(profile_id: str, payload: SwipeRequest) -> SwipeResult:
    return swipe_service.record_swipe(profile_id, payload.target_id, payload.type)


@router.get("/profiles/{profile_id}/super-likes", response_model=QuotaResponse)
def get_super_like_quota(profile_id: str) -> QuotaResponse:
    return QuotaResponse(super_likes_remaining=swipe_service.super_likes_remaining(profile_id))


@router.get("/profiles/{profile_id}/likes", response_model=List[IncomingLike])
def list_incoming_likes(profile_id: str) -> List[IncomingLike]:
    return swipe_service.list_incoming_likes(profile_id)


@router.get("/profiles/{profile_id}/matches", response_model=List[MatchView])
def list_matches(profile_id: str) -> List[MatchView]:
    return matching_service.list_matches(profile_id)


@router.get("/profiles/{profile_id}/matches/{match_id}", response_model=Match)
def get_match(profile_id: str, match_id: str) -> Match:
    return matching_service.get_match(match_id, profile_id)


@router.delete("/profiles/{profile_id}/matches/{match_id}", response_model=Match)
def unmatch(profile_id: str, match_id: str) -> Match:
    return matching_service.unmatch(match_id, profile_id)


@router.get("/profiles/{profile_id}/matches/{match_id}/messages", response_model=MatchThread)
def get_match_messages(profile_id: str, match_id: str) -> MatchThread:
    return message_service.get_match_messages(match_id, profile_id)


@router.post("/profiles/{profile_id}/matches/{match_id}/messages", response_model=Message, status_code=201)
def send_message(profile_id: str, match_id: str, payload: MessageRequest) -> Message:
    return message_service.send_message(match_id, profile_id, payload.content)


@router.post("/profiles/{profile_id}/blocks", response_model=Block)
def block_profile(profile_id: str, payload: BlockRequest) -> Block:
    return safety_service.block_profile(profile_id, payload.blocked_id)


@router.post("/profiles/{profile_id}/reports", response_model=Report, status_code=201)
def report_profile(profile_id: str, payload: ReportRequest) -> Report:
    return safety_service.report_profile(profile_id, payload.reported_id, payload.reason, payload.details)
