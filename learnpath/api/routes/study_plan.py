"""Study plan routes."""

from fastapi import APIRouter

from learnpath.agent.graph import generate_study_plan
from learnpath.api.deps import DBDep
from learnpath.core.logging import get_logger
from learnpath.schemas.study_plan import StudyPlanRequest
from learnpath.services import notification_service, progress_service, user_service

logger = get_logger(__name__)
router = APIRouter(tags=["study-plan"])


@router.post("/generate-study-plan")
async def create_study_plan(data: StudyPlanRequest, db: DBDep) -> dict:
    """Generate a weekly plan for the current step."""
    plan, source = await generate_study_plan(data.profile, data.current_step)
    plan_json = plan.to_json()

    if data.user_id or data.email:
        try:
            user = await user_service.get_or_create_user(db, data.user_id, email=data.email)
            stored = await progress_service.save_study_plan(
                db, user.id, plan_json, data.roadmap_id
            )
            if stored:
                await notification_service.try_create_notification(
                    db,
                    user.id,
                    type="study_plan",
                    title="Study Plan Ready 📅",
                    message=f'Your weekly plan for "{plan.focus_area}" is ready.',
                    metadata={
                        "roadmapId": stored.roadmap_id,
                        "focusArea": plan.focus_area,
                        "weekStart": plan.week_start,
                    },
                )
            await db.commit()
        except Exception as e:
            logger.error("Failed to save study plan", user_id=data.user_id, error=str(e))
            await db.rollback()

    return {"studyPlan": plan_json, "source": source}
