"""Study planner node - turns a roadmap step into a weekly schedule."""

from datetime import date, timedelta

from langchain_core.messages import HumanMessage, SystemMessage

from learnpath.agent.llm import get_llm
from learnpath.agent.llm_utils import invoke_structured
from learnpath.agent.state import GenerationState
from learnpath.core.config import get_settings
from learnpath.core.logging import get_logger
from learnpath.schemas.study_plan import StudyPlan

logger = get_logger(__name__)

STUDY_PLAN_SYSTEM_PROMPT = """\
You are a study coach who builds realistic weekly study plans.

Always answer with a single JSON object of exactly this shape:
{
  "weekStart": "YYYY-MM-DD",
  "weekEnd": "YYYY-MM-DD",
  "focusArea": "Step title",
  "dailyPlans": {
    "monday": [{"time": "18:00", "task": "...", "duration": "1h", "type": "learning"}],
    "tuesday": [], "wednesday": [], "thursday": [], "friday": [],
    "saturday": [], "sunday": []
  },
  "weeklyGoals": ["..."],
  "tips": ["..."]
}

Task "type" must be one of: learning, practice, project, review."""


async def study_planner_node(state: GenerationState) -> GenerationState:
    """Generate a study plan for the current step."""
    profile = state["profile"]
    step = state["current_step"]

    logger.info("Study planner processing", step_title=step.title)

    today = date.today()
    week_start = today - timedelta(days=today.weekday())
    user_prompt = (
        f"Create a detailed weekly study plan for a student working on: {step.title}\n\n"
        "Student Profile:\n"
        f"- Skill Level: {profile.current_skill_level or 'not specified'}\n"
        f"- Learning Style: {profile.learning_style or 'not specified'}\n"
        f"- Available Time: {profile.study_time or 'not specified'} hours per week\n\n"
        f"Current Learning Focus: {step.description}\n"
        f"Skills to Learn: {', '.join(step.skills) or step.title}\n\n"
        f"The week runs from {week_start.isoformat()} to "
        f"{(week_start + timedelta(days=6)).isoformat()}.\n"
        "Mix learning, practice and project work to suit their learning style, "
        "and keep the total weekly hours within their available time."
    )

    try:
        plan = await invoke_structured(
            get_llm(max_tokens=get_settings().STUDY_PLAN_MAX_TOKENS),
            StudyPlan,
            [
                SystemMessage(content=STUDY_PLAN_SYSTEM_PROMPT),
                HumanMessage(content=user_prompt),
            ],
        )
        if plan.daily_plans.task_count() == 0:
            raise ValueError("Study plan has no tasks")
    except Exception as e:
        logger.error("Study plan generation failed", error=str(e))
        state["result"] = None
        state["error"] = str(e)
        return state

    # Task completion matches focus areas against step titles
    plan.focus_area = step.title
    state["result"] = plan
    state["source"] = "ai"
    logger.info("Study plan generated successfully", tasks=plan.daily_plans.task_count())
    return state
