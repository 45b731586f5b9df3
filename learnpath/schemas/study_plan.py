"""Study plan schemas."""

from typing import Literal

from pydantic import Field

from learnpath.schemas.base import CamelModel
from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import RoadmapStepSchema

TaskType = Literal["learning", "practice", "project", "review"]

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class StudyResource(CamelModel):
    title: str
    type: Literal["video", "article", "pdf", "documentation"]
    url: str
    platform: Literal["youtube", "medium", "opensource", "google"] | None = None


class DailyTask(CamelModel):
    """A single scheduled task."""

    id: str | None = None
    time: str
    task: str
    duration: str
    type: TaskType
    completed: bool | None = None
    resources: list[StudyResource] | None = None


class DailyPlans(CamelModel):
    monday: list[DailyTask] = Field(default_factory=list)
    tuesday: list[DailyTask] = Field(default_factory=list)
    wednesday: list[DailyTask] = Field(default_factory=list)
    thursday: list[DailyTask] = Field(default_factory=list)
    friday: list[DailyTask] = Field(default_factory=list)
    saturday: list[DailyTask] = Field(default_factory=list)
    sunday: list[DailyTask] = Field(default_factory=list)

    def task_count(self) -> int:
        return sum(len(getattr(self, day)) for day in WEEKDAYS)


class StudyPlan(CamelModel):
    """A day-by-day schedule for the active roadmap step."""

    week_start: str
    week_end: str
    focus_area: str
    daily_plans: DailyPlans
    weekly_goals: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)


class StudyPlanRequest(CamelModel):
    """Generate a study plan for one step."""

    profile: LearnerProfile
    current_step: RoadmapStepSchema
    user_id: str | None = None
    email: str | None = None
    roadmap_id: int | None = None
