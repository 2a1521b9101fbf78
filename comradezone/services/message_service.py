"""Match thread messaging for the ComradeZone dating service."""

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from comradezone.config import settings
from comradezone.models.match import Match, MatchThread, Message
from comradezone.models.profile import ProfileSummary
from comradezone.services.profile_service import require_profile_row
from comradezone.utils.database import MatchDB, MessageDB, session_scope, utcnow
from comradezone.utils.errors import NotFoundError, ValidationError
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)


def _require_active_match(session: Session, match_id: str, profile_id: str) -> MatchDB:
    row = session.get(MatchDB, match_id)
    if row is None or not row.is_active or not Match.model_validate(row).involves(profile_id):
        logger.warning("Match thread unavailable", match_id=match_id, profile_id=profile_id)
        raise NotFoundError("Match not found", details={"match_id": match_id, "profile_id": profile_id})
    return row


def send_message(match_id: str, sender_id: str, content: str) -> Message:
    """
    Send a message in a match thread.

    Args:
        match_id (str): Match the thread belongs to.
        sender_id (str): Sending profile, must be a party to the match.
        content (str): Message text; surrounding whitespace is stripped.

    Returns:
        Message: The stored message.

    Raises:
        ValidationError: If the message is empty or too long.
        NotFoundError: If the match is missing, inactive or the sender is not a party.
    """
    text = content.strip()
    if not text:
        raise ValidationError("Message cannot be empty")
    if len(text) > settings.MAX_MESSAGE_LENGTH:
        raise ValidationError(
            f"Message cannot be longer than {settings.MAX_MESSAGE_LENGTH} characters",
            details={"length": len(text)},
        )

    with session_scope() as session:
        match = _require_active_match(session, match_id, sender_id)
        now = utcnow()

        row = MessageDB(match_id=match_id, sender_id=sender_id, content=text, created_at=now)
        session.add(row)
        match.last_message_at = now
        session.flush()
        message = Message.model_validate(row)

    logger.info("Message sent", match_id=match_id, sender_id=sender_id, message_id=message.id)
    return message


def get_match_messages(match_id: str, profile_id: str) -> MatchThread:
    """
    Open a match thread.

    Returns the most recent page of messages in chronological order and
    marks the other party's unread messages as read.

    Raises:
        NotFoundError: If the match is missing, inactive or the profile is not a party.
    """
    with session_scope() as session:
        match_row = _require_active_match(session, match_id, profile_id)
        match = Match.model_validate(match_row)
        other = require_profile_row(session, match.other_party(profile_id))

        latest = session.scalars(
            select(MessageDB)
            .where(MessageDB.match_id == match_id)
            .order_by(MessageDB.created_at.desc())
            .limit(settings.MESSAGE_PAGE_SIZE)
        ).all()
        messages = [Message.model_validate(row) for row in reversed(latest)]

        marked = session.execute(
            update(MessageDB)
            .where(
                MessageDB.match_id == match_id,
                MessageDB.sender_id != profile_id,
                MessageDB.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        ).rowcount

        thread = MatchThread(match=match, other_profile=ProfileSummary.from_profile(other), messages=messages)

    logger.debug("Match thread opened", match_id=match_id, profile_id=profile_id, marked_read=marked)
    return thread
