"""Swipe recording and super-like quota tracking for the ComradeZone dating service."""

from datetime import datetime, time, timedelta
from typing import List

import sentry_sdk
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from comradezone.config import settings
from comradezone.models.profile import ProfileSummary
from comradezone.models.swipe import IncomingLike, SwipeResult, SwipeType
from comradezone.services.matching_service import detect_and_create_match
from comradezone.services.profile_service import lock_profiles, require_profile_row
from comradezone.services.safety_service import not_blocked_with
from comradezone.utils.database import ProfileDB, SwipeDB, insert_for, new_id, session_scope, utcnow
from comradezone.utils.errors import ProfileRequiredError, QuotaExhaustedError, ValidationError
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)

POSITIVE_SWIPE_TYPES = [SwipeType.LIKE.value, SwipeType.SUPER_LIKE.value]


def start_of_day(moment: datetime) -> datetime:
    """Truncate a timestamp to midnight of the same (UTC) day."""
    return datetime.combine(moment.date(), time.min)


def consume_super_like(session: Session, profile_id: str, now: datetime) -> int:
    """
    Spend one super-like from the profile's daily quota.

    Runs as two conditional UPDATEs so concurrent requests cannot overspend:
    first the quota is refilled if the last reset happened before today,
    then it is decremented only while it is still positive. The caller's
    transaction must also hold the swipe write, so a failure rolls back both.

    Args:
        session (Session): Active session (the swipe's transaction).
        profile_id (str): Profile spending the super-like.
        now (datetime): Current UTC time.

    Returns:
        int: Super-likes left for today after this one.

    Raises:
        QuotaExhaustedError: If no super-likes are left today.
    """
    today = start_of_day(now)

    refilled = session.execute(
        update(ProfileDB)
        .where(ProfileDB.id == profile_id, ProfileDB.last_super_like_reset < today)
        .values(super_likes_remaining=settings.DAILY_SUPER_LIKES, last_super_like_reset=now)
        .execution_options(synchronize_session=False)
    ).rowcount
    if refilled:
        logger.debug("Super-like quota refilled", profile_id=profile_id)

    remaining = session.execute(
        update(ProfileDB)
        .where(ProfileDB.id == profile_id, ProfileDB.super_likes_remaining > 0)
        .values(super_likes_remaining=ProfileDB.super_likes_remaining - 1)
        .returning(ProfileDB.super_likes_remaining)
        .execution_options(synchronize_session=False)
    ).scalar_one_or_none()

    if remaining is None:
        logger.info("Super-like quota exhausted", profile_id=profile_id)
        raise QuotaExhaustedError(
            "No super likes remaining today",
            details={"profile_id": profile_id, "resets_at": (today + timedelta(days=1)).isoformat()},
        )
    return remaining


def super_likes_remaining(profile_id: str) -> int:
    """
    Get how many super-likes a profile can still send today.

    Read-only: a stale quota from a previous day is reported as full without
    being written back; the refill happens on the next super-like.

    Raises:
        ProfileRequiredError: If the profile does not exist.
    """
    with session_scope() as session:
        row = require_profile_row(session, profile_id, ProfileRequiredError)
        if row.last_super_like_reset < start_of_day(utcnow()):
            return settings.DAILY_SUPER_LIKES
        return max(row.super_likes_remaining, 0)


def _upsert_swipe(session: Session, actor_id: str, target_id: str, swipe_type: SwipeType, now: datetime) -> None:
    insert_stmt = insert_for(session, SwipeDB).values(
        id=new_id(),
        actor_id=actor_id,
        target_id=target_id,
        type=swipe_type.value,
        created_at=now,
        updated_at=now,
    )
    session.execute(
        insert_stmt.on_conflict_do_update(
            index_elements=["actor_id", "target_id"],
            set_={"type": insert_stmt.excluded.type, "updated_at": insert_stmt.excluded.updated_at},
        )
    )


def record_swipe(actor_id: str, target_id: str, swipe_type: SwipeType) -> SwipeResult:
    """
    Record a swipe and check whether it completes a match.

    The swipe for (actor, target) is upserted, so a later swipe replaces the
    type of an earlier one. SUPER_LIKE spends one unit of the daily quota in
    the same transaction. LIKE and SUPER_LIKE run match detection before
    returning.

    Args:
        actor_id (str): Profile that swiped.
        target_id (str): Profile swiped on.
        swipe_type (SwipeType): LIKE, PASS or SUPER_LIKE.

    Returns:
        SwipeResult: Whether this swipe created a new match.

    Raises:
        ValidationError: If the actor swipes on itself or the type is unknown.
        ProfileRequiredError: If the actor has no profile.
        NotFoundError: If the target profile does not exist.
        QuotaExhaustedError: If a SUPER_LIKE is sent with no quota left today.
    """
    try:
        swipe_type = SwipeType(swipe_type)
    except ValueError as e:
        raise ValidationError("Invalid swipe type", details={"type": swipe_type}) from e

    with sentry_sdk.start_span(op="swipe.record", name=f"{actor_id} -> {target_id}") as span:
        if actor_id == target_id:
            logger.warning("Self swipe rejected", profile_id=actor_id)
            raise ValidationError("Cannot swipe on yourself", details={"profile_id": actor_id})

        with session_scope() as session:
            lock_profiles(session, actor_id, target_id)
            require_profile_row(session, actor_id, ProfileRequiredError)
            require_profile_row(session, target_id)

            now = utcnow()
            if swipe_type is SwipeType.SUPER_LIKE:
                remaining = consume_super_like(session, actor_id, now)
                span.set_data("super_likes_remaining", remaining)

            _upsert_swipe(session, actor_id, target_id, swipe_type, now)

            match_id = None
            if swipe_type.is_positive:
                match_id = detect_and_create_match(actor_id, target_id, session=session, now=now)

        result = SwipeResult(matched=match_id is not None, match_id=match_id)
        logger.info(
            "Swipe recorded",
            actor_id=actor_id,
            target_id=target_id,
            type=swipe_type.value,
            matched=result.matched,
        )
        span.set_data("matched", result.matched)
        return result


def list_incoming_likes(profile_id: str) -> List[IncomingLike]:
    """
    Get profiles that liked this profile and are still waiting for an answer.

    A like drops off the list once this profile swipes on the liker (any
    type) or either side blocks the other. Newest likes first.

    Raises:
        ProfileRequiredError: If the profile does not exist.
    """
    with session_scope() as session:
        require_profile_row(session, profile_id, ProfileRequiredError)

        answered = select(SwipeDB.target_id).where(SwipeDB.actor_id == profile_id)
        rows = session.execute(
            select(SwipeDB, ProfileDB)
            .join(ProfileDB, ProfileDB.id == SwipeDB.actor_id)
            .where(
                SwipeDB.target_id == profile_id,
                SwipeDB.type.in_(POSITIVE_SWIPE_TYPES),
                SwipeDB.actor_id.not_in(answered),
                not_blocked_with(SwipeDB.actor_id, profile_id),
            )
            .order_by(SwipeDB.updated_at.desc())
        ).all()

        likes = [
            IncomingLike(
                profile=ProfileSummary.from_profile(liker),
                is_super_like=swipe.type == SwipeType.SUPER_LIKE.value,
                liked_at=swipe.updated_at,
            )
            for swipe, liker in rows
        ]

    logger.debug("Incoming likes retrieved", profile_id=profile_id, count=len(likes))
    return likes
