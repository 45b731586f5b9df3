"""Step completion and progress schemas."""

from datetime import datetime

from pydantic import Field, computed_field, model_validator

from learnpath.schemas.base import CamelModel
from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import Resource


def percent_of(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


class StepCompletionRequest(CamelModel):
    """Mark a step complete, addressed by id and/or title."""

    user_id: str = Field(min_length=1)
    email: str | None = None
    step_id: str | None = None
    step_title: str | None = None

    @model_validator(mode="after")
    def require_step_reference(self) -> "StepCompletionRequest":
        if not self.step_id and not self.step_title:
            raise ValueError("stepId or stepTitle is required")
        return self


class StepUpdateRequest(CamelModel):
    """Set a step's completion flag directly."""

    user_id: str = Field(min_length=1)
    email: str | None = None
    completed: bool


class TaskCompletionRequest(CamelModel):
    """A study-plan task was ticked off."""

    user_id: str = Field(min_length=1)
    email: str | None = None
    day: str = Field(min_length=1)
    task_index: int = Field(ge=0)
    focus_area: str = ""
    completed_tasks_count: int = Field(ge=0)
    total_tasks_count: int = Field(gt=0)

    @model_validator(mode="after")
    def completed_within_total(self) -> "TaskCompletionRequest":
        if self.completed_tasks_count > self.total_tasks_count:
            raise ValueError("completedTasksCount cannot exceed totalTasksCount")
        return self


class FeedbackRequest(CamelModel):
    """Ask the mentor for feedback on progress so far."""

    profile: LearnerProfile
    completed_steps: int = Field(ge=0)
    current_progress: int = Field(ge=0, le=100)
    user_id: str | None = None
    email: str | None = None
    roadmap_id: int | None = None


class StepResponse(CamelModel):
    """Stored step."""

    id: str
    roadmap_id: int
    title: str
    description: str
    duration: str
    skills: list[str]
    resources: list[Resource]
    milestones: list[str]
    completed: bool
    progress: int


class ProgressResponse(CamelModel):
    """Stored progress record with its derived percentage."""

    id: int
    user_id: str
    roadmap_id: int
    total_steps: int
    completed_steps: int
    feedback: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage(self) -> int:
        return percent_of(self.completed_steps, self.total_steps)


class TaskProgress(CamelModel):
    """Task-level progress echoed back after a task completion."""

    completed_tasks: int
    total_tasks: int
    percentage: int
