"""Block and report handling for the ComradeZone dating service."""

from typing import Any, Optional

import sentry_sdk
from sqlalchemy import and_, or_, select, update
from sqlalchemy.orm import Session

from comradezone.models.match import canonical_pair
from comradezone.models.safety import Block, Report, ReportReason
from comradezone.services.profile_service import lock_profiles, require_profile_row
from comradezone.utils.database import BlockDB, MatchDB, ReportDB, insert_for, new_id, session_scope, utcnow
from comradezone.utils.errors import ProfileRequiredError, ValidationError
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)


def not_blocked_with(column: Any, profile_id: str) -> Any:
    """
    Build a filter excluding profiles in a block relationship with `profile_id`.

    Both directions count: profiles this one blocked and profiles that
    blocked this one.
    """
    blocked_by_me = select(BlockDB.blocked_id).where(BlockDB.blocker_id == profile_id)
    blocking_me = select(BlockDB.blocker_id).where(BlockDB.blocked_id == profile_id)
    return and_(column.not_in(blocked_by_me), column.not_in(blocking_me))


def is_blocked_between(session: Session, profile_a: str, profile_b: str) -> bool:
    """Check whether either profile has blocked the other."""
    block_id = session.scalar(
        select(BlockDB.id)
        .where(
            or_(
                and_(BlockDB.blocker_id == profile_a, BlockDB.blocked_id == profile_b),
                and_(BlockDB.blocker_id == profile_b, BlockDB.blocked_id == profile_a),
            )
        )
        .limit(1)
    )
    return block_id is not None


def block_profile(blocker_id: str, blocked_id: str) -> Block:
    """
    Block a profile and deactivate any match with it.

    The block row is written before the match is deactivated, and both
    writes share one transaction, so a concurrent match detection cannot
    bring the match back. Blocking twice is a no-op.

    Args:
        blocker_id (str): Profile performing the block.
        blocked_id (str): Profile being blocked.

    Returns:
        Block: The (possibly pre-existing) block record.

    Raises:
        ValidationError: If a profile tries to block itself.
        ProfileRequiredError: If the blocker has no profile.
        NotFoundError: If the blocked profile does not exist.
    """
    with sentry_sdk.start_span(op="safety.block", name=f"{blocker_id} -> {blocked_id}") as span:
        if blocker_id == blocked_id:
            raise ValidationError("Cannot block yourself", details={"profile_id": blocker_id})

        with session_scope() as session:
            lock_profiles(session, blocker_id, blocked_id)
            require_profile_row(session, blocker_id, ProfileRequiredError)
            require_profile_row(session, blocked_id)

            insert_stmt = insert_for(session, BlockDB).values(
                id=new_id(),
                blocker_id=blocker_id,
                blocked_id=blocked_id,
                created_at=utcnow(),
            )
            session.execute(insert_stmt.on_conflict_do_nothing(index_elements=["blocker_id", "blocked_id"]))

            profile1_id, profile2_id = canonical_pair(blocker_id, blocked_id)
            deactivated = session.execute(
                update(MatchDB)
                .where(
                    MatchDB.profile1_id == profile1_id,
                    MatchDB.profile2_id == profile2_id,
                    MatchDB.is_active.is_(True),
                )
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            ).rowcount

            row = session.scalars(
                select(BlockDB).where(BlockDB.blocker_id == blocker_id, BlockDB.blocked_id == blocked_id)
            ).one()
            block = Block.model_validate(row)

        logger.info(
            "Profile blocked",
            blocker_id=blocker_id,
            blocked_id=blocked_id,
            matches_deactivated=deactivated,
        )
        span.set_data("matches_deactivated", deactivated)
        return block


def report_profile(
    reporter_id: str,
    reported_id: str,
    reason: ReportReason,
    details: Optional[str] = None,
) -> Report:
    """
    File a report against a profile.

    Raises:
        ValidationError: If a profile reports itself or the reason is unknown.
        ProfileRequiredError: If the reporter has no profile.
        NotFoundError: If the reported profile does not exist.
    """
    if reporter_id == reported_id:
        raise ValidationError("Cannot report yourself", details={"profile_id": reporter_id})
    try:
        reason = ReportReason(reason)
    except ValueError as e:
        raise ValidationError(
            "Invalid report reason",
            details={"reason": reason, "allowed": [r.value for r in ReportReason]},
        ) from e

    with session_scope() as session:
        require_profile_row(session, reporter_id, ProfileRequiredError)
        require_profile_row(session, reported_id)

        row = ReportDB(
            reporter_id=reporter_id,
            reported_id=reported_id,
            reason=reason.value,
            details=details.strip() if details else None,
        )
        session.add(row)
        session.flush()
        report = Report.model_validate(row)

    logger.info("Profile reported", report_id=report.id, reported_id=reported_id, reason=reason.value)
    return report
