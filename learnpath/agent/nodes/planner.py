"""Planner nodes - generate structured learning roadmaps."""

from langchain_core.messages import HumanMessage, SystemMessage

from learnpath.agent.llm import get_llm
from learnpath.agent.llm_utils import invoke_structured
from learnpath.agent.state import GenerationState
from learnpath.core.config import get_settings
from learnpath.core.logging import get_logger
from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import CompletedRoadmapRef, RoadmapContent

logger = get_logger(__name__)


# ============================================================================
# Prompts
# ============================================================================

ROADMAP_SYSTEM_PROMPT = """\
You are an expert career counselor and learning path designer.
You create practical, achievable learning roadmaps tailored to a learner's
goal, current skill level, learning style and available study time.

Always answer with a single JSON object of exactly this shape:
{
  "careerPath": "Name of the career path",
  "overview": "2-3 sentence overview",
  "estimatedTimeframe": "e.g. 6-9 Months",
  "steps": [
    {
      "id": "step-1",
      "title": "Step title",
      "description": "What this step covers",
      "duration": "e.g. 4 Weeks",
      "resources": [
        {"title": "...", "type": "course|book|tutorial|project|documentation",
         "url": "https://...", "description": "..."}
      ],
      "skills": ["skill", "..."],
      "milestones": ["milestone", "..."]
    }
  ],
  "weeklySchedule": {
    "monday": "...", "tuesday": "...", "wednesday": "...", "thursday": "...",
    "friday": "...", "saturday": "...", "sunday": "..."
  }
}

Resource "type" must be one of: course, book, tutorial, project, documentation.
Prefer real resources (Coursera, Udemy, YouTube channels, books, official docs)."""

NEXT_ROADMAP_INSTRUCTIONS = """\
The learner has just COMPLETED the roadmap "{career_path}" (level {order}).
Skills already covered: {covered}.

Design the NEXT roadmap (level {next_order}) that:
1. Builds on what they learned without repeating it
2. Goes one level deeper toward their career goal
3. Has 4-6 steps with 3-5 resources each
4. Keeps the weekly schedule within their study time"""


def _profile_block(profile: LearnerProfile) -> str:
    return (
        f"Interests: {profile.interests or 'not specified'}\n"
        f"Education Level: {profile.education_level or 'not specified'}\n"
        f"Career Goal: {profile.career_goal or 'not specified'}\n"
        f"Current Skill Level: {profile.current_skill_level or 'not specified'}\n"
        f"Learning Style: {profile.learning_style or 'not specified'}\n"
        f"Available Study Time: {profile.study_time or 'not specified'} hours per week"
    )


def normalize_roadmap(roadmap: RoadmapContent) -> RoadmapContent:
    """Renumber step ids and reset completion state on fresh content."""
    for index, step in enumerate(roadmap.steps, start=1):
        step.id = f"step-{index}"
        step.completed = False
        step.progress = 0
    return roadmap


# ============================================================================
# Node Functions
# ============================================================================


async def roadmap_planner_node(state: GenerationState) -> GenerationState:
    """Generate a first roadmap from the learner profile."""
    profile = state["profile"]
    logger.info("Roadmap planner processing", career_goal=profile.career_goal)

    user_prompt = (
        "Create a personalized learning roadmap for this learner:\n\n"
        f"{_profile_block(profile)}\n\n"
        "Break the path into 5-8 major steps. For each step give a realistic "
        "duration for their skill level and study time, 3-5 specific resources, "
        "the key skills to acquire and milestones to track progress."
    )
    return await _plan(state, user_prompt)


async def next_roadmap_planner_node(state: GenerationState) -> GenerationState:
    """Generate the follow-up roadmap after a completed one."""
    profile = state["profile"]
    completed = state.get("completed_roadmap") or CompletedRoadmapRef()
    logger.info(
        "Next roadmap planner processing",
        career_goal=profile.career_goal,
        completed_order=completed.order,
    )

    covered = sorted({skill for step in completed.steps for skill in step.skills})
    user_prompt = (
        f"{_profile_block(profile)}\n\n"
        + NEXT_ROADMAP_INSTRUCTIONS.format(
            career_path=completed.career_path or "previous roadmap",
            order=completed.order,
            next_order=completed.order + 1,
            covered=", ".join(covered) or "unknown",
        )
    )
    return await _plan(state, user_prompt)


async def _plan(state: GenerationState, user_prompt: str) -> GenerationState:
    try:
        roadmap = await invoke_structured(
            get_llm(max_tokens=get_settings().ROADMAP_MAX_TOKENS),
            RoadmapContent,
            [
                SystemMessage(content=ROADMAP_SYSTEM_PROMPT),
                HumanMessage(content=user_prompt),
            ],
        )
    except Exception as e:
        logger.error("Roadmap generation failed", kind=state.get("kind"), error=str(e))
        state["result"] = None
        state["error"] = str(e)
        return state

    state["result"] = normalize_roadmap(roadmap)
    state["source"] = "ai"
    logger.info(
        "Roadmap generated successfully",
        career_path=roadmap.career_path,
        steps=len(roadmap.steps),
    )
    return state
