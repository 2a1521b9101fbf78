"""Profile service for the ComradeZone dating service."""

from typing import List, Optional, Type

import sentry_sdk
from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from comradezone.config import settings
from comradezone.models.profile import Photo, Profile, ProfileInput, ProfileSummary
from comradezone.utils.database import PhotoDB, ProfileDB, SeekingGenderDB, session_scope, utcnow
from comradezone.utils.errors import NotFoundError, ProfileRequiredError, ValidationError
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PROMPTS = 3

# (minimum photo count, completeness bonus), checked in order
PHOTO_BONUS_STEPS = ((5, 25), (3, 20), (1, 10))


def compute_completeness(data: ProfileInput, photo_count: int = 0) -> int:
    """
    Score how complete a profile is.

    Filled fields contribute fixed weights and photos add a tiered bonus.
    The score is advisory only and used to order candidate lists.

    Args:
        data (ProfileInput): Profile fields.
        photo_count (int): Number of photos attached to the profile.

    Returns:
        int: Completeness between 0 and 100.
    """
    score = 0
    if data.display_name:
        score += 10
    if data.bio and len(data.bio) > 20:
        score += 15
    if data.age:
        score += 10
    if data.gender:
        score += 10
    if data.seeking_genders:
        score += 10
    if len(data.interests) >= 3:
        score += 15
    if data.course:
        score += 5
    answered = [p for p in data.prompts if p.answer.strip()]
    score += 10 * min(len(answered), 2)
    if data.relationship_goal:
        score += 5

    for threshold, bonus in PHOTO_BONUS_STEPS:
        if photo_count >= threshold:
            score += bonus
            break

    return min(score, 100)


def _validate_profile_input(data: ProfileInput) -> None:
    """Check the business rules a profile submission must satisfy."""
    min_allowed = settings.MIN_PROFILE_AGE
    if data.age < min_allowed:
        raise ValidationError(f"You must be at least {min_allowed} years old", details={"age": data.age})
    if data.min_age < min_allowed:
        raise ValidationError(
            f"Minimum preferred age cannot be below {min_allowed}", details={"min_age": data.min_age}
        )
    if data.min_age > data.max_age:
        raise ValidationError(
            "min_age must be less than or equal to max_age",
            details={"min_age": data.min_age, "max_age": data.max_age},
        )
    if not data.seeking_genders:
        raise ValidationError("Choose at least one gender you are interested in")
    if len(data.prompts) > MAX_PROMPTS:
        raise ValidationError(f"At most {MAX_PROMPTS} prompts are allowed", details={"count": len(data.prompts)})


def _normalize_interests(interests: List[str]) -> List[str]:
    # Lowercase, strip and dedupe while keeping the submitted order
    seen: dict[str, None] = {}
    for interest in interests:
        cleaned = interest.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def _apply_input(row: ProfileDB, data: ProfileInput) -> None:
    row.display_name = data.display_name.strip()
    row.bio = data.bio
    row.age = data.age
    row.gender = data.gender.value
    row.min_age = data.min_age
    row.max_age = data.max_age
    row.interests = _normalize_interests(data.interests)
    row.course = data.course
    row.year_of_study = data.year_of_study
    row.faculty = data.faculty
    row.relationship_goal = data.relationship_goal.value if data.relationship_goal else None
    row.instagram_handle = data.instagram_handle
    row.prompts = [prompt.model_dump() for prompt in data.prompts]

    wanted = {gender.value for gender in data.seeking_genders}
    kept = [s for s in row.seeking if s.gender in wanted]
    missing = sorted(wanted - {s.gender for s in kept})
    row.seeking = kept + [SeekingGenderDB(gender=gender) for gender in missing]


def _refresh_completeness(row: ProfileDB) -> None:
    data = ProfileInput.model_validate(row, from_attributes=True)
    row.completeness = compute_completeness(data, len(row.photos))


def require_profile_row(
    session: Session,
    profile_id: str,
    missing: Type[NotFoundError] = NotFoundError,
) -> ProfileDB:
    """
    Load a profile row inside an open session.

    Args:
        session (Session): Active database session.
        profile_id (str): Profile ID.
        missing (Type[NotFoundError]): Error raised when the profile does not exist.

    Returns:
        ProfileDB: The profile row.

    Raises:
        NotFoundError: If the profile does not exist (or the `missing` subclass).
    """
    row = session.get(ProfileDB, profile_id)
    if row is None:
        logger.warning("Profile not found", profile_id=profile_id)
        if missing is ProfileRequiredError:
            raise ProfileRequiredError(details={"profile_id": profile_id})
        raise missing(f"Profile not found: {profile_id}", details={"profile_id": profile_id})
    return row


def lock_profiles_stmt(*profile_ids: str) -> Select:
    """Build a SELECT ... FOR UPDATE over the given profiles, in id order."""
    return (
        select(ProfileDB.id)
        .where(ProfileDB.id.in_(sorted(set(profile_ids))))
        .order_by(ProfileDB.id)
        .with_for_update()
    )


def lock_profiles(session: Session, *profile_ids: str) -> None:
    """
    Row-lock profiles for the rest of the transaction.

    Writes that read the other side of a pair (reciprocal swipes, blocks)
    take this lock first, so a second request for the same pair waits and
    then reads the first one's committed rows. Rows are locked in id order.
    SQLite has no row locks; it serializes writers on its own.
    """
    session.execute(lock_profiles_stmt(*profile_ids)).all()


def upsert_profile(account_id: str, data: ProfileInput) -> Profile:
    """
    Create or update the dating profile owned by an account.

    Args:
        account_id (str): Owning account ID.
        data (ProfileInput): Submitted profile fields.

    Returns:
        Profile: The stored profile.

    Raises:
        ValidationError: If the submission breaks a profile rule (age < 18, ...).
    """
    with sentry_sdk.start_span(op="profile.upsert", name=account_id) as span:
        _validate_profile_input(data)

        with session_scope() as session:
            row = session.scalars(select(ProfileDB).where(ProfileDB.account_id == account_id)).first()
            created = row is None
            if row is None:
                row = ProfileDB(
                    account_id=account_id,
                    super_likes_remaining=settings.DAILY_SUPER_LIKES,
                    last_super_like_reset=utcnow(),
                )
                session.add(row)

            _apply_input(row, data)
            # Score what was stored (normalized interests), not the raw submission
            _refresh_completeness(row)
            session.flush()
            profile = Profile.model_validate(row)

        logger.info(
            "Profile created" if created else "Profile updated",
            profile_id=profile.id,
            account_id=account_id,
            completeness=profile.completeness,
        )
        span.set_data("created", created)
        return profile


def get_profile(profile_id: str) -> Profile:
    """
    Get a profile by ID.

    Raises:
        NotFoundError: If the profile does not exist.
    """
    with session_scope() as session:
        return Profile.model_validate(require_profile_row(session, profile_id))


def get_profile_for_account(account_id: str) -> Profile:
    """
    Get the profile owned by an account.

    Raises:
        ProfileRequiredError: If the account has not created a profile yet.
    """
    with session_scope() as session:
        row = session.scalars(select(ProfileDB).where(ProfileDB.account_id == account_id)).first()
        if row is None:
            raise ProfileRequiredError(details={"account_id": account_id})
        return Profile.model_validate(row)


def set_visibility(profile_id: str, show_me: bool) -> Profile:
    """
    Show or hide a profile from discovery.

    Hidden profiles keep their matches and history; they just stop appearing
    as candidates.
    """
    with session_scope() as session:
        row = require_profile_row(session, profile_id, ProfileRequiredError)
        row.show_me = show_me
        session.flush()
        profile = Profile.model_validate(row)

    logger.info("Profile visibility changed", profile_id=profile_id, show_me=show_me)
    return profile


def add_photo(profile_id: str, url: str, is_main: bool = False) -> Photo:
    """
    Attach a photo URL to a profile.

    The first photo always becomes the main one. Marking a new photo as main
    unsets the flag on the others.

    Raises:
        ProfileRequiredError: If the profile does not exist.
        ValidationError: If the URL is not http(s) or the photo limit is reached.
    """
    if not url.startswith(("http://", "https://")):
        raise ValidationError("Photo URL must be an http(s) URL", details={"url": url})

    with session_scope() as session:
        row = require_profile_row(session, profile_id, ProfileRequiredError)

        if len(row.photos) >= settings.MAX_PROFILE_PHOTOS:
            raise ValidationError(
                f"Maximum {settings.MAX_PROFILE_PHOTOS} photos allowed",
                details={"profile_id": profile_id},
            )

        make_main = is_main or not row.photos
        if make_main:
            for existing in row.photos:
                existing.is_main = False

        photo = PhotoDB(url=url, is_main=make_main, sort_order=len(row.photos))
        row.photos.append(photo)
        _refresh_completeness(row)
        session.flush()
        result = Photo.model_validate(photo)

    logger.info("Photo added", profile_id=profile_id, photo_id=result.id, is_main=result.is_main)
    return result


def delete_photo(profile_id: str, photo_id: str) -> None:
    """
    Remove a photo from a profile.

    Remaining photos are renumbered; if the main photo was removed the next
    one takes its place.

    Raises:
        NotFoundError: If the photo does not exist or belongs to another profile.
    """
    with session_scope() as session:
        photo = session.get(PhotoDB, photo_id)
        if photo is None or photo.profile_id != profile_id:
            raise NotFoundError("Photo not found", details={"photo_id": photo_id})

        row = require_profile_row(session, profile_id, ProfileRequiredError)
        was_main = photo.is_main
        row.photos.remove(photo)
        for index, remaining in enumerate(row.photos):
            remaining.sort_order = index
        if was_main and row.photos:
            row.photos[0].is_main = True
        _refresh_completeness(row)

    logger.info("Photo deleted", profile_id=profile_id, photo_id=photo_id)


def clamp_limit(limit: Optional[int]) -> int:
    """Bound a requested batch size to the configured range."""
    if limit is None:
        return settings.DEFAULT_CANDIDATE_LIMIT
    return max(1, min(limit, settings.MAX_CANDIDATE_LIMIT))


def browse_profiles(limit: Optional[int] = None) -> List[ProfileSummary]:
    """
    List visible profiles for guests who have not created a profile.

    Uses the same ordering as the candidate list but applies no preference
    or history filtering.
    """
    with session_scope() as session:
        rows = session.scalars(
            select(ProfileDB)
            .where(ProfileDB.show_me.is_(True))
            .order_by(ProfileDB.completeness.desc(), ProfileDB.created_at.desc())
            .limit(clamp_limit(limit))
        ).all()
        return [ProfileSummary.from_profile(row) for row in rows]
