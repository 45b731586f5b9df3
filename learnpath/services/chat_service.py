"""Chat service for message history and assistant context."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.logging import get_logger
from learnpath.models.chat import ChatMessage
from learnpath.models.user import User
from learnpath.schemas.chat import MessageRole
from learnpath.services import progress_service, roadmap_service, user_service

logger = get_logger(__name__)


async def save_message(
    db: AsyncSession,
    user_id: str,
    role: MessageRole,
    content: str,
) -> ChatMessage:
    """Append a chat turn.

    Note: This function assumes the caller will commit the transaction.
    """
    message = ChatMessage(user_id=user_id, role=role.value, content=content)
    db.add(message)
    await db.flush()
    return message


async def get_history(db: AsyncSession, user_id: str) -> list[ChatMessage]:
    """Get the user's full chat history, oldest first."""
    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.created_at, ChatMessage.id)
    )
    return list(result.scalars().all())


async def get_recent_messages(
    db: AsyncSession,
    user_id: str,
    limit: int,
    before_id: int | None = None,
) -> list[ChatMessage]:
    """Get the latest ``limit`` messages in chronological order.

    Args:
        before_id: Only messages older than this one (excludes the turn
            being answered)
    """
    stmt = select(ChatMessage).where(ChatMessage.user_id == user_id)
    if before_id is not None:
        stmt = stmt.where(ChatMessage.id < before_id)
    result = await db.execute(
        stmt.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc()).limit(limit)
    )
    return list(reversed(result.scalars().all()))


async def build_context(db: AsyncSession, user: User) -> str:
    """Describe the learner and their current roadmap for the system prompt."""
    profile = user_service.get_profile(user)
    lines = [
        "Student Profile:",
        f"- Name: {user.name or 'Student'}",
        f"- Learning Style: {(profile and profile.learning_style) or 'not specified'}",
        f"- Skill Level: {(profile and profile.current_skill_level) or 'not specified'}",
        f"- Career Goal: {(profile and profile.career_goal) or 'not specified'}",
        f"- Available Study Time: {(profile and profile.study_time) or 'not specified'} hours/week",
    ]

    roadmap = await roadmap_service.get_active_roadmap(db, user.id)
    if roadmap:
        progress = await progress_service.get_progress(db, user.id, roadmap.id)
        completed = progress.completed_steps if progress else 0
        focus = next((step.title for step in roadmap.steps if not step.completed), None)
        lines += [
            "",
            "Current Learning Path:",
            f"- Career Path: {roadmap.career_path}",
            f"- Overview: {roadmap.overview}",
            f"- Total Steps: {len(roadmap.steps)}",
            f"- Status: {completed} / {len(roadmap.steps)} steps completed",
            f"- Current Focus Step: {focus or 'All steps completed'}",
        ]

    return "\n".join(lines)
