"""Template fallback node - deterministic content when the LLM fails."""

from learnpath.agent.state import GenerationState
from learnpath.agent.templates import (
    next_roadmap_template,
    roadmap_template,
    study_plan_template,
)
from learnpath.core.logging import get_logger
from learnpath.schemas.roadmap import CompletedRoadmapRef

logger = get_logger(__name__)


async def template_fallback_node(state: GenerationState) -> GenerationState:
    """Fill ``result`` from the built-in templates."""
    kind = state.get("kind", "roadmap")
    profile = state["profile"]

    logger.warning("Using template fallback", kind=kind, error=state.get("error"))

    if kind == "study_plan":
        state["result"] = study_plan_template(profile, state["current_step"])
    elif kind == "next_roadmap":
        completed = state.get("completed_roadmap") or CompletedRoadmapRef()
        state["result"] = next_roadmap_template(profile, completed.order)
    else:
        state["result"] = roadmap_template(profile, level=1)

    state["source"] = "template"
    return state
