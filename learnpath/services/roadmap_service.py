"""Roadmap service for persistence and history."""

from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.logging import get_logger
from learnpath.models.progress import Progress
from learnpath.models.roadmap import Roadmap, Step
from learnpath.schemas.roadmap import RoadmapContent

logger = get_logger(__name__)


# ============================================================================
# Queries
# ============================================================================


async def get_user_roadmap(
    db: AsyncSession,
    user_id: str,
    roadmap_id: int,
) -> Roadmap | None:
    """Get a roadmap by id, only if ``user_id`` owns it."""
    roadmap = await db.get(Roadmap, roadmap_id)
    if roadmap is None or roadmap.user_id != user_id:
        return None
    return roadmap


async def get_active_roadmap(db: AsyncSession, user_id: str) -> Roadmap | None:
    """Get the roadmap the learner is working on.

    The latest uncompleted roadmap, else the most recent one.
    """
    result = await db.execute(
        select(Roadmap)
        .where(Roadmap.user_id == user_id, Roadmap.completed_at.is_(None))
        .order_by(Roadmap.order.desc(), Roadmap.id.desc())
        .limit(1)
    )
    roadmap = result.scalar_one_or_none()
    if roadmap:
        return roadmap

    result = await db.execute(
        select(Roadmap)
        .where(Roadmap.user_id == user_id)
        .order_by(Roadmap.order.desc(), Roadmap.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_roadmaps(db: AsyncSession, user_id: str) -> list[Roadmap]:
    """Get the user's roadmap history ordered by ``order``."""
    result = await db.execute(
        select(Roadmap).where(Roadmap.user_id == user_id).order_by(Roadmap.order, Roadmap.id)
    )
    return list(result.scalars().all())


async def _max_order(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(select(func.max(Roadmap.order)).where(Roadmap.user_id == user_id))
    return result.scalar() or 0


# ============================================================================
# Mutations
# ============================================================================


async def delete_uncompleted_roadmaps(db: AsyncSession, user_id: str) -> int:
    """Delete the user's uncompleted roadmaps with their steps and progress.

    Returns:
        Number of roadmaps deleted
    """
    result = await db.execute(
        select(Roadmap).where(Roadmap.user_id == user_id, Roadmap.completed_at.is_(None))
    )
    roadmaps = list(result.scalars().all())
    if not roadmaps:
        return 0

    await db.execute(
        delete(Progress).where(Progress.roadmap_id.in_([roadmap.id for roadmap in roadmaps]))
    )
    # Steps go with their roadmap through the delete-orphan cascade
    for roadmap in roadmaps:
        await db.delete(roadmap)
    await db.flush()

    logger.info("Uncompleted roadmaps deleted", user_id=user_id, count=len(roadmaps))
    return len(roadmaps)


async def save_roadmap(
    db: AsyncSession,
    user_id: str,
    content: RoadmapContent,
    replace: bool = True,
) -> Roadmap:
    """Persist generated roadmap content with its steps and progress record.

    Args:
        db: Database session
        user_id: Owner
        content: Roadmap body (AI or template)
        replace: Drop the user's uncompleted roadmaps first (initial
            generation); otherwise append to the history (next roadmap)

    Returns:
        The stored roadmap

    Note: This function assumes the caller will commit the transaction.
    """
    if replace:
        await delete_uncompleted_roadmaps(db, user_id)
    order = await _max_order(db, user_id) + 1

    roadmap = Roadmap(
        user_id=user_id,
        career_path=content.career_path,
        overview=content.overview,
        estimated_timeframe=content.estimated_timeframe,
        weekly_schedule=content.weekly_schedule.model_dump(mode="json"),
        order=order,
        steps=[
            Step(
                position=position,
                title=step.title,
                description=step.description,
                duration=step.duration,
                skills=list(step.skills),
                resources=[r.model_dump(mode="json", by_alias=True) for r in step.resources],
                milestones=list(step.milestones),
                completed=step.completed,
                progress=100 if step.completed else min(step.progress, 99),
            )
            for position, step in enumerate(content.steps)
        ],
    )
    db.add(roadmap)
    await db.flush()

    db.add(
        Progress(
            user_id=user_id,
            roadmap_id=roadmap.id,
            total_steps=len(roadmap.steps),
            completed_steps=sum(1 for step in roadmap.steps if step.completed),
        )
    )
    await db.flush()

    logger.info(
        "Roadmap saved",
        roadmap_id=roadmap.id,
        user_id=user_id,
        order=order,
        steps=len(roadmap.steps),
        replace=replace,
    )
    return roadmap


async def complete_roadmap(
    db: AsyncSession,
    user_id: str,
    roadmap_id: int | None = None,
) -> Roadmap | None:
    """Stamp ``completed_at`` on a roadmap.

    Uses ``roadmap_id`` when given and owned by the user, otherwise the
    active roadmap. Already-completed roadmaps keep their timestamp.
    """
    roadmap = None
    if roadmap_id is not None:
        roadmap = await get_user_roadmap(db, user_id, roadmap_id)
    if roadmap is None:
        roadmap = await get_active_roadmap(db, user_id)
    if roadmap is None:
        return None

    if roadmap.completed_at is None:
        roadmap.completed_at = datetime.utcnow()
        await db.flush()
        logger.info("Roadmap completed", roadmap_id=roadmap.id, user_id=user_id)
    return roadmap
