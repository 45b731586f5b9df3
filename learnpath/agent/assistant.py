"""Short-form LLM replies: mentor feedback and the learning assistant chat."""

from collections.abc import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from learnpath.agent.llm import get_fast_llm, get_llm
from learnpath.core.config import get_settings
from learnpath.core.logging import get_logger
from learnpath.schemas.profile import LearnerProfile

logger = get_logger(__name__)

FEEDBACK_SYSTEM_PROMPT = """\
You are an encouraging mentor. Give personalized feedback and motivation to a student.

Provide:
1. A celebration of their progress (2-3 sentences)
2. Their strengths based on completed work
3. Suggested next focus areas
4. 2-3 actionable tips for improvement
5. A motivational message to keep them going

Keep it encouraging, specific and personal, with a friendly, supportive tone."""

CHAT_SYSTEM_PROMPT = """\
You are a helpful and supportive learning assistant for students. You:
- help students understand their learning roadmap and study plans
- give personalized learning advice and answer questions about topics and resources
- suggest study techniques that suit their learning style
- celebrate their achievements

Be conversational and encouraging. Ask clarifying questions when needed and give actionable advice.

{context}"""

CHAT_FALLBACK_REPLY = (
    "I'm having trouble reaching my knowledge source right now. "
    "Keep going with your current step, and try asking me again in a moment."
)


def feedback_template(profile: LearnerProfile, completed_steps: int, current_progress: int) -> str:
    """Encouraging feedback built without the LLM."""
    goal = profile.career_goal or "your goal"
    if completed_steps == 0:
        opening = f"You've taken the first step toward becoming a {goal}. Starting is the hardest part."
    elif current_progress >= 100:
        opening = f"You finished your roadmap toward {goal} - that's a real achievement!"
    else:
        opening = (
            f"Great work! You've completed {completed_steps} "
            f"step{'s' if completed_steps != 1 else ''} and you're {current_progress}% of the way there."
        )
    return (
        f"{opening}\n\n"
        "Tips to keep the momentum:\n"
        "- Schedule short, regular study sessions instead of long irregular ones.\n"
        "- Build a small project with each new skill so it sticks.\n"
        "- Review your milestones every week and adjust your plan.\n\n"
        "Keep going - consistent effort compounds!"
    )


async def generate_feedback(
    profile: LearnerProfile, completed_steps: int, current_progress: int
) -> tuple[str, str]:
    """Return ``(feedback, source)`` where source is "ai" or "template"."""
    user_prompt = (
        "Student Profile:\n"
        f"- Career Goal: {profile.career_goal or 'not specified'}\n"
        f"- Skill Level: {profile.current_skill_level or 'not specified'}\n\n"
        "Progress:\n"
        f"- Completed Steps: {completed_steps}\n"
        f"- Current Progress: {current_progress}%"
    )

    try:
        llm = get_llm(max_tokens=get_settings().FEEDBACK_MAX_TOKENS)
        response = await llm.ainvoke(
            [SystemMessage(content=FEEDBACK_SYSTEM_PROMPT), HumanMessage(content=user_prompt)]
        )
        feedback = str(response.content).strip()
        if not feedback:
            raise ValueError("Empty feedback")
    except Exception as e:
        logger.error("Feedback generation failed", error=str(e))
        return feedback_template(profile, completed_steps, current_progress), "template"

    logger.info("Feedback generated", completed_steps=completed_steps)
    return feedback, "ai"


def _history_messages(history: Sequence[tuple[str, str]]) -> list[BaseMessage]:
    return [
        AIMessage(content=content) if role == "assistant" else HumanMessage(content=content)
        for role, content in history
    ]


async def chat_reply(message: str, history: Sequence[tuple[str, str]], context: str) -> str:
    """Answer ``message`` given earlier ``(role, content)`` turns and learner context."""
    logger.info("Chat reply processing", message_preview=message[:50], history=len(history))

    try:
        llm = get_fast_llm()
        response = await llm.ainvoke(
            [
                SystemMessage(content=CHAT_SYSTEM_PROMPT.format(context=context)),
                *_history_messages(history),
                HumanMessage(content=message),
            ]
        )
        reply = str(response.content).strip()
        if not reply:
            raise ValueError("Empty chat reply")
    except Exception as e:
        logger.error("Chat generation failed", error=str(e))
        return CHAT_FALLBACK_REPLY

    logger.info("Chat response generated", reply_preview=reply[:100])
    return reply
