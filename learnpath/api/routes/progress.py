"""Step completion and progress routes."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from learnpath.agent.assistant import generate_feedback
from learnpath.api.deps import DBDep, cache_control, require_user
from learnpath.core.logging import get_logger
from learnpath.models.progress import Progress
from learnpath.models.roadmap import Step
from learnpath.schemas.notification import NotificationResponse
from learnpath.schemas.progress import (
    FeedbackRequest,
    ProgressResponse,
    StepCompletionRequest,
    StepResponse,
    StepUpdateRequest,
    TaskCompletionRequest,
)
from learnpath.services import progress_service, user_service

logger = get_logger(__name__)
router = APIRouter(tags=["progress"])

PROGRESS_MAX_AGE = 10


def _step_json(step: Step) -> dict:
    return StepResponse.model_validate(step).to_json()


def _progress_json(progress: Progress) -> dict:
    return ProgressResponse.model_validate(progress).to_json()


@router.put("/complete-step")
async def complete_step(data: StepCompletionRequest, db: DBDep) -> dict:
    """Mark a step completed, addressed by id or (fuzzy) title."""
    user = await require_user(db, data.user_id, data.email)

    result = await progress_service.complete_step(
        db, user.id, step_id=data.step_id, step_title=data.step_title
    )
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No matching step found",
        )
    step, progress = result
    await db.commit()

    return {
        "success": True,
        "message": "Step marked as completed",
        "step": _step_json(step),
        "progress": _progress_json(progress),
    }


@router.patch("/steps/{step_id}")
async def update_step(step_id: str, data: StepUpdateRequest, db: DBDep) -> dict:
    """Set a step's completion flag."""
    user = await require_user(db, data.user_id, data.email)

    result = await progress_service.set_step_completion(db, user.id, step_id, data.completed)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Step not found",
        )
    step, progress = result
    await db.commit()

    return {"success": True, "step": _step_json(step), "progress": _progress_json(progress)}


@router.post("/mark-task-completed")
async def mark_task_completed(data: TaskCompletionRequest, db: DBDep) -> dict:
    """Record a study-plan task completion and update the matching step."""
    user = await require_user(db, data.user_id, data.email)

    notification, task_progress = await progress_service.record_task_completion(db, user.id, data)
    await db.commit()

    return {
        "success": True,
        "message": "Task marked as completed and progress updated",
        "notification": NotificationResponse.model_validate(notification).to_json(),
        "progress": task_progress.to_json(),
    }


@router.get("/progress")
async def get_progress(
    response: Response,
    db: DBDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
    roadmap_id: Annotated[int, Query(alias="roadmapId")],
    email: str | None = None,
) -> dict:
    """Get the progress record of a roadmap."""
    user = await require_user(db, user_id, email)

    progress = await progress_service.get_progress(db, user.id, roadmap_id)
    if not progress:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Progress not found",
        )

    response.headers["Cache-Control"] = cache_control(PROGRESS_MAX_AGE)
    return {"progress": _progress_json(progress)}


@router.post("/generate-feedback")
async def create_feedback(data: FeedbackRequest, db: DBDep) -> dict:
    """Generate mentor feedback; stored on the progress record when possible."""
    feedback, source = await generate_feedback(
        data.profile, data.completed_steps, data.current_progress
    )

    if data.user_id or data.email:
        try:
            user = await user_service.resolve_user(db, data.user_id, data.email)
            if user:
                await progress_service.save_feedback(db, user.id, feedback, data.roadmap_id)
                await db.commit()
        except Exception as e:
            logger.error("Failed to save feedback", user_id=data.user_id, error=str(e))
            await db.rollback()

    return {"feedback": feedback, "source": source}
