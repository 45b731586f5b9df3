"""LangGraph content generation graph."""

from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from learnpath.agent.nodes import (
    next_roadmap_planner_node,
    roadmap_planner_node,
    study_planner_node,
    template_fallback_node,
)
from learnpath.agent.state import GenerationState
from learnpath.core.logging import get_logger
from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import CompletedRoadmapRef, RoadmapContent, RoadmapStepSchema
from learnpath.schemas.study_plan import StudyPlan

logger = get_logger(__name__)

PLANNER_BY_KIND = {
    "roadmap": "roadmap_planner",
    "next_roadmap": "next_roadmap_planner",
    "study_plan": "study_planner",
}


def _route_by_kind(state: GenerationState) -> str:
    return PLANNER_BY_KIND.get(state.get("kind", "roadmap"), "roadmap_planner")


def _route_after_planner(state: GenerationState) -> str:
    """Go to END when the LLM produced content, otherwise use templates."""
    if state.get("result") is not None:
        return "END"
    return "template_fallback"


def create_generation_graph() -> CompiledStateGraph[GenerationState]:
    """Create the content generation workflow graph.

    Flow:
    1. [conditional on kind] -> roadmap_planner | next_roadmap_planner | study_planner
    2. [conditional] -> END (content generated)
                     -> template_fallback (LLM failed)
    3. template_fallback -> END
    """
    workflow = StateGraph(GenerationState)

    workflow.add_node("roadmap_planner", roadmap_planner_node)
    workflow.add_node("next_roadmap_planner", next_roadmap_planner_node)
    workflow.add_node("study_planner", study_planner_node)
    workflow.add_node("template_fallback", template_fallback_node)

    workflow.add_conditional_edges(
        START,
        _route_by_kind,
        {name: name for name in PLANNER_BY_KIND.values()},
    )

    for planner in PLANNER_BY_KIND.values():
        workflow.add_conditional_edges(
            planner,
            _route_after_planner,
            {
                "END": END,
                "template_fallback": "template_fallback",
            },
        )

    workflow.add_edge("template_fallback", END)

    return workflow.compile()  # type: ignore[return-value]


_graph = None


def get_graph() -> CompiledStateGraph[GenerationState]:
    """Get or create the global graph instance."""
    global _graph
    if _graph is None:
        _graph = create_generation_graph()
        logger.info("Generation graph created")
    return _graph


async def _run(state: GenerationState) -> GenerationState:
    final_state = await get_graph().ainvoke(state)
    logger.info(
        "Generation finished",
        kind=state.get("kind"),
        source=final_state.get("source"),
    )
    return final_state


async def generate_roadmap(profile: LearnerProfile) -> tuple[RoadmapContent, str]:
    """Return ``(roadmap, source)`` where source is "ai" or "template"."""
    final_state = await _run({"kind": "roadmap", "profile": profile})
    return final_state["result"], final_state["source"]


async def generate_next_roadmap(
    profile: LearnerProfile, completed_roadmap: CompletedRoadmapRef
) -> tuple[RoadmapContent, str]:
    """Return the roadmap that follows ``completed_roadmap``."""
    final_state = await _run(
        {"kind": "next_roadmap", "profile": profile, "completed_roadmap": completed_roadmap}
    )
    return final_state["result"], final_state["source"]


async def generate_study_plan(
    profile: LearnerProfile, current_step: RoadmapStepSchema
) -> tuple[StudyPlan, str]:
    """Return ``(study_plan, source)`` for ``current_step``."""
    final_state = await _run(
        {"kind": "study_plan", "profile": profile, "current_step": current_step}
    )
    return final_state["result"], final_state["source"]
