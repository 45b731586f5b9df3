"""Pydantic schemas."""

from learnpath.schemas.chat import ChatMessageResponse, ChatRequest, MessageRole
from learnpath.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    NotificationUpdate,
)
from learnpath.schemas.profile import CreateUserRequest, LearnerProfile, ProfileSaveRequest
from learnpath.schemas.progress import (
    FeedbackRequest,
    ProgressResponse,
    StepCompletionRequest,
    StepResponse,
    StepUpdateRequest,
    TaskCompletionRequest,
    TaskProgress,
    percent_of,
)
from learnpath.schemas.roadmap import (
    CompletedRoadmapRef,
    GenerateNextRoadmapRequest,
    GenerateRoadmapRequest,
    Resource,
    RoadmapContent,
    RoadmapResponse,
    RoadmapStepSchema,
    WeeklySchedule,
)
from learnpath.schemas.study_plan import DailyPlans, DailyTask, StudyPlan, StudyPlanRequest

__all__ = [
    "ChatMessageResponse",
    "ChatRequest",
    "MessageRole",
    "NotificationCreate",
    "NotificationResponse",
    "NotificationUpdate",
    "CreateUserRequest",
    "LearnerProfile",
    "ProfileSaveRequest",
    "FeedbackRequest",
    "ProgressResponse",
    "StepCompletionRequest",
    "StepResponse",
    "StepUpdateRequest",
    "TaskCompletionRequest",
    "TaskProgress",
    "percent_of",
    "CompletedRoadmapRef",
    "GenerateNextRoadmapRequest",
    "GenerateRoadmapRequest",
    "Resource",
    "RoadmapContent",
    "RoadmapResponse",
    "RoadmapStepSchema",
    "WeeklySchedule",
    "DailyPlans",
    "DailyTask",
    "StudyPlan",
    "StudyPlanRequest",
]
