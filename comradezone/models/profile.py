"""Profile models for the ComradeZone dating service."""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    """
    Gender enumeration.

    Used both for a profile's own gender and for the set of genders it seeks.
    """

    MALE = "male"
    FEMALE = "female"
    NON_BINARY = "non_binary"


class RelationshipGoal(str, Enum):
    """What a profile is hoping to find."""

    SERIOUS = "serious"
    CASUAL = "casual"
    FRIENDSHIP = "friendship"
    NOT_SURE = "not_sure"


class Prompt(BaseModel):
    """A question/answer pair shown on a profile card."""

    question: str = Field(..., min_length=1, max_length=200)
    answer: str = Field(..., max_length=500)


class ProfileInput(BaseModel):
    """
    Profile submission payload.

    Carries everything the owning account can set. Business rules (minimum age,
    age range ordering, prompt count) are checked by the profile service so
    they surface as ComradeZone validation errors.
    """

    display_name: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=1000)
    age: int
    gender: Gender
    seeking_genders: List[Gender] = Field(default_factory=list)
    min_age: int = 18
    max_age: int = 30
    interests: List[str] = Field(default_factory=list)
    course: Optional[str] = None
    year_of_study: Optional[int] = None
    faculty: Optional[str] = None
    relationship_goal: Optional[RelationshipGoal] = None
    instagram_handle: Optional[str] = None
    prompts: List[Prompt] = Field(default_factory=list)


class Photo(BaseModel):
    """Profile photo reference."""

    id: str
    url: str
    is_main: bool = False
    sort_order: int = 0

    model_config = ConfigDict(from_attributes=True)


class Profile(BaseModel):
    """
    Profile model.

    The full dating-facing persona of an account, including the quota fields
    used by the super-like tracker.
    """

    id: str
    account_id: str
    display_name: str
    bio: Optional[str] = None
    age: int
    gender: Gender
    seeking_genders: List[Gender] = Field(default_factory=list)
    min_age: int
    max_age: int
    show_me: bool = True
    completeness: int = 0
    interests: List[str] = Field(default_factory=list)
    course: Optional[str] = None
    year_of_study: Optional[int] = None
    faculty: Optional[str] = None
    relationship_goal: Optional[RelationshipGoal] = None
    instagram_handle: Optional[str] = None
    prompts: List[Prompt] = Field(default_factory=list)
    photos: List[Photo] = Field(default_factory=list)
    super_likes_remaining: int
    last_super_like_reset: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @property
    def main_photo_url(self) -> Optional[str]:
        """URL of the main photo, falling back to the first one."""
        for photo in self.photos:
            if photo.is_main:
                return photo.url
        return self.photos[0].url if self.photos else None


class ProfileSummary(BaseModel):
    """
    Profile card view.

    A trimmed profile used in candidate lists, incoming likes and match lists.
    """

    id: str
    display_name: str
    age: int
    gender: Gender
    bio: Optional[str] = None
    course: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    prompts: List[Prompt] = Field(default_factory=list)
    completeness: int = 0
    photo_url: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Any) -> "ProfileSummary":
        """Build a summary from a Profile or a profile database row."""
        if not isinstance(profile, Profile):
            profile = Profile.model_validate(profile)
        return cls(
            id=profile.id,
            display_name=profile.display_name,
            age=profile.age,
            gender=profile.gender,
            bio=profile.bio,
            course=profile.course,
            interests=profile.interests,
            prompts=profile.prompts,
            completeness=profile.completeness,
            photo_url=profile.main_photo_url,
        )
