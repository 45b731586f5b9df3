"""Roadmap schemas for API requests, responses and LLM output."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from learnpath.schemas.base import CamelModel
from learnpath.schemas.profile import LearnerProfile

ResourceType = Literal["course", "book", "tutorial", "project", "documentation"]


class Resource(CamelModel):
    """A learning resource attached to a step."""

    title: str
    type: ResourceType
    url: str | None = None
    description: str = ""


class RoadmapStepSchema(CamelModel):
    """A step in the learning roadmap."""

    id: str = ""
    title: str
    description: str = ""
    duration: str = ""
    resources: list[Resource] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    milestones: list[str] = Field(default_factory=list)
    completed: bool = False
    progress: int = Field(default=0, ge=0, le=100)


class WeeklySchedule(CamelModel):
    """What to study on each day of the week."""

    monday: str = ""
    tuesday: str = ""
    wednesday: str = ""
    thursday: str = ""
    friday: str = ""
    saturday: str = ""
    sunday: str = ""


class RoadmapContent(CamelModel):
    """Generated roadmap body, shared by the LLM, templates and storage."""

    career_path: str
    overview: str = ""
    estimated_timeframe: str = ""
    steps: list[RoadmapStepSchema] = Field(min_length=1)
    weekly_schedule: WeeklySchedule = Field(default_factory=WeeklySchedule)


class RoadmapResponse(RoadmapContent):
    """Stored roadmap."""

    id: int
    order: int
    completed_at: datetime | None = None
    created_at: datetime | None = None


class GenerateRoadmapRequest(CamelModel):
    """Generate (or regenerate) the first roadmap for a learner."""

    profile: LearnerProfile
    user_id: str | None = None
    email: str | None = None


class CompletedRoadmapRef(CamelModel):
    """The roadmap a learner has just finished, as held by the client."""

    id: int | None = None
    career_path: str = ""
    order: int = Field(default=1, ge=1)
    steps: list[RoadmapStepSchema] = Field(default_factory=list)


class GenerateNextRoadmapRequest(CamelModel):
    """Generate the follow-up roadmap after one is completed."""

    profile: LearnerProfile
    completed_roadmap: CompletedRoadmapRef
    user_id: str | None = None
    email: str | None = None
