"""Candidate discovery and match handling for the ComradeZone dating service."""

from datetime import datetime
from typing import List, Optional

import sentry_sdk
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from comradezone.models.match import Match, MatchView, Message, canonical_pair
from comradezone.models.profile import ProfileSummary
from comradezone.models.swipe import SwipeType
from comradezone.services.profile_service import clamp_limit, require_profile_row
from comradezone.services.safety_service import is_blocked_between, not_blocked_with
from comradezone.utils.database import (
    MatchDB,
    MessageDB,
    ProfileDB,
    SeekingGenderDB,
    SwipeDB,
    insert_for,
    new_id,
    session_scope,
    utcnow,
)
from comradezone.utils.errors import NotFoundError, ProfileRequiredError
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)


def list_candidates(requester_id: str, limit: Optional[int] = None) -> List[ProfileSummary]:
    """
    Get the next batch of profiles a profile can swipe on.

    A candidate is visible, is not the requester, has not been swiped on by
    the requester, is not in a block relationship with the requester in
    either direction, and passes both sides' gender preferences plus the
    requester's age range. Only the requester's own outgoing swipes exclude
    a candidate; being liked by someone does not hide them.

    Results are ordered by completeness, then newest profile first.

    Args:
        requester_id (str): Profile asking for candidates.
        limit (Optional[int]): Batch size, clamped to the configured maximum.

    Returns:
        List[ProfileSummary]: Eligible candidates (possibly empty).

    Raises:
        ProfileRequiredError: If the requester has no profile.
    """
    with sentry_sdk.start_span(op="match.candidates", name=requester_id) as span:
        with session_scope() as session:
            me = require_profile_row(session, requester_id, ProfileRequiredError)
            seeking = me.seeking_genders
            if not seeking:
                logger.debug("Requester seeks no genders", profile_id=requester_id)
                span.set_data("count", 0)
                return []

            already_swiped = select(SwipeDB.target_id).where(SwipeDB.actor_id == me.id)
            seeking_me = select(SeekingGenderDB.profile_id).where(SeekingGenderDB.gender == me.gender)

            rows = session.scalars(
                select(ProfileDB)
                .where(
                    ProfileDB.id != me.id,
                    ProfileDB.show_me.is_(True),
                    ProfileDB.id.not_in(already_swiped),
                    not_blocked_with(ProfileDB.id, me.id),
                    ProfileDB.gender.in_(seeking),
                    ProfileDB.id.in_(seeking_me),
                    ProfileDB.age.between(me.min_age, me.max_age),
                )
                .order_by(ProfileDB.completeness.desc(), ProfileDB.created_at.desc())
                .limit(clamp_limit(limit))
            ).all()
            candidates = [ProfileSummary.from_profile(row) for row in rows]

        logger.info("Candidates retrieved", profile_id=requester_id, count=len(candidates))
        span.set_data("count", len(candidates))
        return candidates


def _existing_match_id(session: Session, profile1_id: str, profile2_id: str) -> Optional[str]:
    """Find the match (active or not) stored for a canonical pair."""
    return session.scalar(
        select(MatchDB.id).where(MatchDB.profile1_id == profile1_id, MatchDB.profile2_id == profile2_id)
    )


def _detect(session: Session, actor_id: str, target_id: str, now: datetime) -> Optional[str]:
    reverse_type = session.scalar(
        select(SwipeDB.type).where(SwipeDB.actor_id == target_id, SwipeDB.target_id == actor_id)
    )
    if reverse_type is None or not SwipeType(reverse_type).is_positive:
        return None

    if is_blocked_between(session, actor_id, target_id):
        logger.info("Reciprocal like between blocked profiles ignored", actor_id=actor_id, target_id=target_id)
        return None

    profile1_id, profile2_id = canonical_pair(actor_id, target_id)
    existing_id = _existing_match_id(session, profile1_id, profile2_id)
    if existing_id is not None:
        logger.debug("Match already exists", match_id=existing_id, actor_id=actor_id, target_id=target_id)
        return None

    # A concurrent reciprocal swipe may insert first; the unique pair turns ours into a no-op
    insert_stmt = insert_for(session, MatchDB).values(
        id=new_id(),
        profile1_id=profile1_id,
        profile2_id=profile2_id,
        is_active=True,
        matched_at=now,
    )
    match_id = session.execute(
        insert_stmt.on_conflict_do_nothing(index_elements=["profile1_id", "profile2_id"]).returning(MatchDB.id)
    ).scalar_one_or_none()

    if match_id is None:
        logger.info("Match created concurrently by the other party", actor_id=actor_id, target_id=target_id)
        return None

    logger.info("Match created", match_id=match_id, profile1_id=profile1_id, profile2_id=profile2_id)
    return match_id


def detect_and_create_match(
    actor_id: str,
    target_id: str,
    session: Optional[Session] = None,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Create a match if the target already likes the actor back.

    Called right after the actor's LIKE or SUPER_LIKE is written. A match is
    created only when the reverse swipe is positive, no block exists between
    the pair, and no match (active or not) exists for the pair yet. Running it
    again for the same pair never creates a second match.

    Args:
        actor_id (str): Profile that just liked.
        target_id (str): Profile that was liked.
        session (Optional[Session]): Session to join; a new transaction is used if omitted.
        now (Optional[datetime]): Match timestamp, defaults to the current UTC time.

    Returns:
        Optional[str]: ID of the newly created match, or None if no new match.
    """
    now = now or utcnow()
    if session is not None:
        return _detect(session, actor_id, target_id, now)
    with session_scope() as own_session:
        return _detect(own_session, actor_id, target_id, now)


def get_match(match_id: str, profile_id: str) -> Match:
    """
    Get a match the profile is a party to.

    Raises:
        NotFoundError: If the match does not exist or the profile is not part of it.
    """
    with session_scope() as session:
        row = session.get(MatchDB, match_id)
        match = Match.model_validate(row) if row is not None else None
        if match is None or not match.involves(profile_id):
            raise NotFoundError("Match not found", details={"match_id": match_id, "profile_id": profile_id})
        return match


def list_matches(profile_id: str) -> List[MatchView]:
    """
    Get the active matches of a profile.

    Each entry describes the other party and the latest message. Threads
    with recent messages come first, then the newest matches.

    Raises:
        ProfileRequiredError: If the profile does not exist.
    """
    with sentry_sdk.start_span(op="match.list", name=profile_id) as span:
        with session_scope() as session:
            require_profile_row(session, profile_id, ProfileRequiredError)

            rows = session.scalars(
                select(MatchDB)
                .where(
                    or_(MatchDB.profile1_id == profile_id, MatchDB.profile2_id == profile_id),
                    MatchDB.is_active.is_(True),
                )
                .order_by(MatchDB.last_message_at.desc().nulls_last(), MatchDB.matched_at.desc())
            ).all()

            views = []
            for row in rows:
                match = Match.model_validate(row)
                other = session.get(ProfileDB, match.other_party(profile_id))
                if other is None:
                    logger.warning("Match partner missing", match_id=match.id, profile_id=profile_id)
                    continue

                last_message = session.scalars(
                    select(MessageDB)
                    .where(MessageDB.match_id == match.id)
                    .order_by(MessageDB.created_at.desc())
                    .limit(1)
                ).first()

                views.append(
                    MatchView(
                        match_id=match.id,
                        profile=ProfileSummary.from_profile(other),
                        matched_at=match.matched_at,
                        last_message_at=match.last_message_at,
                        last_message=Message.model_validate(last_message) if last_message else None,
                    )
                )

        logger.debug("Matches retrieved", profile_id=profile_id, count=len(views))
        span.set_data("count", len(views))
        return views


def unmatch(match_id: str, requesting_id: str) -> Match:
    """
    Deactivate a match.

    History (messages, swipes) is kept. Unmatching an already inactive match
    succeeds without changes.

    Raises:
        NotFoundError: If the match does not exist or the requester is not a party.
    """
    with session_scope() as session:
        row = session.get(MatchDB, match_id)
        if row is None or not Match.model_validate(row).involves(requesting_id):
            logger.warning("Unmatch rejected", match_id=match_id, profile_id=requesting_id)
            raise NotFoundError("Match not found", details={"match_id": match_id, "profile_id": requesting_id})

        if row.is_active:
            row.is_active = False
            logger.info("Match deactivated", match_id=match_id, profile_id=requesting_id)
        else:
            logger.debug("Match already inactive", match_id=match_id)

        session.flush()
        return Match.model_validate(row)
