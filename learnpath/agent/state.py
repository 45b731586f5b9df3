"""LangGraph generation state definition."""

from typing import Annotated, Literal, TypedDict

from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import CompletedRoadmapRef, RoadmapContent, RoadmapStepSchema
from learnpath.schemas.study_plan import StudyPlan

GenerationKind = Literal["roadmap", "next_roadmap", "study_plan"]


class GenerationState(TypedDict, total=False):
    """State passed through the content generation graph."""

    # === Input ===
    kind: GenerationKind
    profile: LearnerProfile
    completed_roadmap: Annotated[CompletedRoadmapRef | None, "Only for next_roadmap"]
    current_step: Annotated[RoadmapStepSchema | None, "Only for study_plan"]

    # === Output ===
    result: Annotated[RoadmapContent | StudyPlan | None, "Validated generated content"]
    source: Annotated[str, "ai | template"]
    error: Annotated[str | None, "LLM failure that triggered the template fallback"]
