"""Progress service for step completion and progress reconciliation.

Every mutation here ends with ``recompute_progress`` so the progress record
always mirrors the roadmap's steps, and keeps ``Step.progress == 100`` exactly
when ``Step.completed`` is set.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.logging import get_logger
from learnpath.models.notification import Notification
from learnpath.models.progress import Progress
from learnpath.models.roadmap import Roadmap, Step
from learnpath.schemas.progress import TaskCompletionRequest, TaskProgress, percent_of
from learnpath.services import notification_service, roadmap_service

logger = get_logger(__name__)

# Task-driven progress stays below 100; only an explicit completion finishes a step
MAX_TASK_PROGRESS = 99


# ============================================================================
# Step Resolution
# ============================================================================


def _norm(text: str | None) -> str:
    return (text or "").strip().lower()


def match_step_by_title(
    steps: Sequence[Step],
    title: str | None,
    exact: bool = True,
) -> Step | None:
    """Find a step by title, first match wins.

    Order: exact (case-insensitive) title when ``exact`` is set, then a step
    title containing ``title``, then ``title`` containing a step title.
    """
    needle = _norm(title)
    if not needle:
        return None

    if exact:
        for step in steps:
            if _norm(step.title) == needle:
                return step
    for step in steps:
        if needle in _norm(step.title):
            return step
    for step in steps:
        step_title = _norm(step.title)
        if step_title and step_title in needle:
            return step
    return None


async def get_user_step(db: AsyncSession, user_id: str, step_id: str) -> Step | None:
    """Get a step by id, only if it belongs to one of ``user_id``'s roadmaps."""
    result = await db.execute(
        select(Step)
        .join(Roadmap, Step.roadmap_id == Roadmap.id)
        .where(Step.id == step_id, Roadmap.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def resolve_step(
    db: AsyncSession,
    user_id: str,
    step_id: str | None = None,
    step_title: str | None = None,
) -> Step | None:
    """Resolve a step reference from the client.

    Tries the id first, then title matching against the active roadmap.
    """
    if step_id:
        step = await get_user_step(db, user_id, step_id)
        if step:
            return step

    if step_title:
        roadmap = await roadmap_service.get_active_roadmap(db, user_id)
        if roadmap:
            step = match_step_by_title(roadmap.steps, step_title)
            if step:
                logger.debug("Step resolved by title", step_id=step.id, step_title=step_title)
                return step

    logger.warning("Step not found", user_id=user_id, step_id=step_id, step_title=step_title)
    return None


# ============================================================================
# Progress Record
# ============================================================================


async def get_progress(
    db: AsyncSession,
    user_id: str,
    roadmap_id: int,
) -> Progress | None:
    result = await db.execute(
        select(Progress).where(Progress.user_id == user_id, Progress.roadmap_id == roadmap_id)
    )
    return result.scalar_one_or_none()


async def recompute_progress(db: AsyncSession, user_id: str, roadmap_id: int) -> Progress:
    """Rebuild the progress record from the roadmap's steps, creating it if missing."""
    await db.flush()
    total = await db.scalar(select(func.count(Step.id)).where(Step.roadmap_id == roadmap_id))
    completed = await db.scalar(
        select(func.count(Step.id)).where(Step.roadmap_id == roadmap_id, Step.completed.is_(True))
    )

    progress = await get_progress(db, user_id, roadmap_id)
    if progress is None:
        progress = Progress(user_id=user_id, roadmap_id=roadmap_id)
        db.add(progress)
    progress.total_steps = total or 0
    progress.completed_steps = completed or 0
    await db.flush()

    logger.debug(
        "Progress recomputed",
        roadmap_id=roadmap_id,
        completed_steps=progress.completed_steps,
        total_steps=progress.total_steps,
    )
    return progress


# ============================================================================
# Mutations
# ============================================================================


def _apply_completion(step: Step, completed: bool) -> None:
    step.completed = completed
    step.progress = 100 if completed else 0


async def _sync_roadmap_completion(
    db: AsyncSession,
    user_id: str,
    roadmap_id: int,
    progress: Progress,
) -> bool:
    """Stamp or clear ``completed_at`` to match the progress record.

    Returns:
        True when the roadmap has just become completed
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if roadmap is None:
        return False

    all_done = progress.total_steps > 0 and progress.completed_steps == progress.total_steps
    if all_done and roadmap.completed_at is None:
        await roadmap_service.complete_roadmap(db, user_id, roadmap_id)
        return True
    if not all_done and roadmap.completed_at is not None:
        roadmap.completed_at = None
        await db.flush()
    return False


async def complete_step(
    db: AsyncSession,
    user_id: str,
    step_id: str | None = None,
    step_title: str | None = None,
) -> tuple[Step, Progress] | None:
    """Mark a step completed and notify the learner.

    Returns:
        ``(step, progress)``, or None when the step cannot be resolved

    Note: This function assumes the caller will commit the transaction.
    """
    step = await resolve_step(db, user_id, step_id, step_title)
    if step is None:
        return None

    _apply_completion(step, True)
    progress = await recompute_progress(db, user_id, step.roadmap_id)
    roadmap_done = await _sync_roadmap_completion(db, user_id, step.roadmap_id, progress)

    logger.info(
        "Step completed",
        step_id=step.id,
        roadmap_id=step.roadmap_id,
        completed_steps=progress.completed_steps,
        total_steps=progress.total_steps,
    )

    percentage = percent_of(progress.completed_steps, progress.total_steps)
    await notification_service.try_create_notification(
        db,
        user_id,
        type="step_completion",
        title="Step Completed! 🌟",
        message=f'Congratulations! You\'ve completed "{step.title}". You\'re making great progress!',
        metadata={
            "stepId": step.id,
            "stepTitle": step.title,
            "progressPercentage": percentage,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
    if roadmap_done:
        await notification_service.try_create_notification(
            db,
            user_id,
            type="roadmap_completed",
            title="Roadmap Completed! 🏆",
            message="You've completed every step of your roadmap. Ready for the next level?",
            metadata={
                "roadmapId": step.roadmap_id,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    return step, progress


async def set_step_completion(
    db: AsyncSession,
    user_id: str,
    step_id: str,
    completed: bool,
) -> tuple[Step, Progress] | None:
    """Set a step's completion flag directly.

    Returns:
        ``(step, progress)``, or None when the user owns no such step
    """
    step = await get_user_step(db, user_id, step_id)
    if step is None:
        return None

    _apply_completion(step, completed)
    progress = await recompute_progress(db, user_id, step.roadmap_id)
    await _sync_roadmap_completion(db, user_id, step.roadmap_id, progress)

    logger.info("Step completion set", step_id=step.id, completed=completed)
    return step, progress


async def record_task_completion(
    db: AsyncSession,
    user_id: str,
    request: TaskCompletionRequest,
) -> tuple[Notification, TaskProgress]:
    """Apply a study-plan task completion to the matching step.

    The step whose title matches the focus area gets the task percentage as
    its progress (capped below 100 and left alone once completed). A
    ``task_completion`` notification is always created.
    """
    percentage = percent_of(request.completed_tasks_count, request.total_tasks_count)

    roadmap = await roadmap_service.get_active_roadmap(db, user_id)
    if roadmap:
        step = match_step_by_title(roadmap.steps, request.focus_area, exact=False)
        if step and not step.completed:
            step.progress = min(percentage, MAX_TASK_PROGRESS)
            logger.info(
                "Step progress updated from tasks",
                step_id=step.id,
                progress=step.progress,
                completed_tasks=request.completed_tasks_count,
                total_tasks=request.total_tasks_count,
            )
        elif step is None:
            logger.info("No step matches focus area", focus_area=request.focus_area)
        await recompute_progress(db, user_id, roadmap.id)

    notification = await notification_service.create_notification(
        db,
        user_id,
        type="task_completion",
        title="Great Job! Task Completed 🎉",
        message=(
            f'You\'ve completed a task in your study plan for "{request.focus_area}". '
            "Keep up the momentum!"
        ),
        metadata={
            "day": request.day,
            "taskIndex": request.task_index,
            "focusArea": request.focus_area,
            "completedCount": request.completed_tasks_count,
            "totalCount": request.total_tasks_count,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )

    return notification, TaskProgress(
        completed_tasks=request.completed_tasks_count,
        total_tasks=request.total_tasks_count,
        percentage=percentage,
    )


# ============================================================================
# Generated Content
# ============================================================================


async def _progress_for(
    db: AsyncSession,
    user_id: str,
    roadmap_id: int | None,
) -> Progress | None:
    roadmap = None
    if roadmap_id is not None:
        roadmap = await roadmap_service.get_user_roadmap(db, user_id, roadmap_id)
    if roadmap is None:
        roadmap = await roadmap_service.get_active_roadmap(db, user_id)
    if roadmap is None:
        return None
    return await get_progress(db, user_id, roadmap.id) or await recompute_progress(
        db, user_id, roadmap.id
    )


async def save_study_plan(
    db: AsyncSession,
    user_id: str,
    study_plan: dict,
    roadmap_id: int | None = None,
) -> Progress | None:
    """Store the latest study plan on the roadmap's progress record."""
    progress = await _progress_for(db, user_id, roadmap_id)
    if progress is None:
        return None
    progress.study_plan = study_plan
    await db.flush()
    logger.info("Study plan saved", roadmap_id=progress.roadmap_id, user_id=user_id)
    return progress


async def save_feedback(
    db: AsyncSession,
    user_id: str,
    feedback: str,
    roadmap_id: int | None = None,
) -> Progress | None:
    """Store the latest mentor feedback on the roadmap's progress record."""
    progress = await _progress_for(db, user_id, roadmap_id)
    if progress is None:
        return None
    progress.feedback = feedback
    await db.flush()
    logger.info("Feedback saved", roadmap_id=progress.roadmap_id, user_id=user_id)
    return progress
