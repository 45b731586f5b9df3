"""Roadmap API routes."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from learnpath.agent.graph import generate_next_roadmap, generate_roadmap
from learnpath.api.deps import DBDep, cache_control, require_user
from learnpath.core.logging import get_logger
from learnpath.models.roadmap import Roadmap
from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import (
    CompletedRoadmapRef,
    GenerateNextRoadmapRequest,
    GenerateRoadmapRequest,
    RoadmapContent,
    RoadmapResponse,
)
from learnpath.services import notification_service, roadmap_service, user_service

logger = get_logger(__name__)
router = APIRouter(tags=["roadmaps"])

ACTIVE_ROADMAP_MAX_AGE = 30
COMPLETED_ROADMAP_MAX_AGE = 3600


def _roadmap_json(roadmap: Roadmap) -> dict:
    return RoadmapResponse.model_validate(roadmap).to_json()


async def _persist(
    db: DBDep,
    content: RoadmapContent,
    profile: LearnerProfile,
    user_id: str | None,
    email: str | None,
    replace: bool,
    completed: CompletedRoadmapRef | None = None,
) -> dict | None:
    """Store a generated roadmap; None when there is no user or storage fails."""
    if not user_id and not email:
        return None

    try:
        user = await user_service.get_or_create_user(db, user_id, email=email)
        if not user.profile:
            user.profile = profile.model_dump(mode="json", by_alias=True)
        if not replace:
            await roadmap_service.complete_roadmap(db, user.id, completed.id if completed else None)

        roadmap = await roadmap_service.save_roadmap(db, user.id, content, replace=replace)
        if replace:
            notification_type = "roadmap_generated"
            title = "New Roadmap Ready! 🗺️"
            message = f'Your "{roadmap.career_path}" roadmap is ready. Time to start learning!'
        else:
            notification_type = "milestone"
            title = "🎉 New Roadmap Unlocked!"
            finished = (completed.career_path if completed else "") or "your roadmap"
            message = (
                f'Congratulations on completing "{finished}"! '
                f'Your next roadmap "{roadmap.career_path}" is ready.'
            )
        await notification_service.try_create_notification(
            db,
            user.id,
            type=notification_type,
            title=title,
            message=message,
            metadata={"roadmapId": roadmap.id, "order": roadmap.order},
        )
        await db.commit()
    except Exception as e:
        logger.error("Failed to save roadmap", user_id=user_id, error=str(e), exc_info=True)
        await db.rollback()
        return None

    return _roadmap_json(roadmap)


@router.post("/generate-roadmap")
async def create_roadmap(data: GenerateRoadmapRequest, db: DBDep) -> dict:
    """Generate a first roadmap and replace the user's unfinished ones."""
    content, source = await generate_roadmap(data.profile)
    stored = await _persist(db, content, data.profile, data.user_id, data.email, replace=True)
    return {
        "roadmap": stored or content.to_json(),
        "saved": stored is not None,
        "source": source,
    }


@router.post("/generate-next-roadmap")
async def create_next_roadmap(data: GenerateNextRoadmapRequest, db: DBDep) -> dict:
    """Generate the roadmap that follows a completed one and append it to the history."""
    content, source = await generate_next_roadmap(data.profile, data.completed_roadmap)
    stored = await _persist(
        db,
        content,
        data.profile,
        data.user_id,
        data.email,
        replace=False,
        completed=data.completed_roadmap,
    )
    return {
        "roadmap": stored or content.to_json(),
        "saved": stored is not None,
        "source": source,
    }


@router.get("/roadmap")
async def get_roadmap(
    response: Response,
    db: DBDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
    email: str | None = None,
    history: bool = False,
    roadmap_id: Annotated[int | None, Query(alias="roadmapId")] = None,
) -> dict:
    """Get the active roadmap, a specific one, or the whole history."""
    user = await require_user(db, user_id, email)

    if history:
        roadmaps = await roadmap_service.list_roadmaps(db, user.id)
        return {"roadmaps": [_roadmap_json(r) for r in roadmaps]}

    if roadmap_id is not None:
        roadmap = await roadmap_service.get_user_roadmap(db, user.id, roadmap_id)
    else:
        roadmap = await roadmap_service.get_active_roadmap(db, user.id)
    if not roadmap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )

    max_age = COMPLETED_ROADMAP_MAX_AGE if roadmap.completed_at else ACTIVE_ROADMAP_MAX_AGE
    response.headers["Cache-Control"] = cache_control(max_age)
    return {"roadmap": _roadmap_json(roadmap)}
