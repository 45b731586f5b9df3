"""Learner profile and user schemas."""

from pydantic import ConfigDict, Field

from learnpath.schemas.base import CamelModel


class LearnerProfile(CamelModel):
    """Learning preferences collected by the onboarding form."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    interests: str = ""
    education_level: str = ""
    career_goal: str = ""
    current_skill_level: str = ""
    learning_style: str = ""
    study_time: str = ""  # hours per week, e.g. "5-10"
    created_at: str | None = None


class ProfileSaveRequest(CamelModel):
    """Mirror the client-side profile on the server."""

    user_id: str = Field(min_length=1)
    email: str | None = None
    name: str | None = None
    profile_data: LearnerProfile


class CreateUserRequest(CamelModel):
    """Register a user signed up through the identity provider."""

    uid: str = Field(min_length=1)
    email: str = Field(min_length=1)
    name: str | None = None
