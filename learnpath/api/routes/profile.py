"""Learner profile routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from learnpath.api.deps import DBDep
from learnpath.core.logging import get_logger
from learnpath.schemas.profile import ProfileSaveRequest
from learnpath.services import user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    db: DBDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
) -> dict:
    """Get the stored profile; null when the user or profile is unknown."""
    user = await user_service.get_user(db, user_id)
    profile = user_service.get_profile(user) if user else None
    return {"profile": profile.to_json() if profile else None}


@router.post("")
async def save_profile(data: ProfileSaveRequest, db: DBDep) -> dict:
    """Mirror the client-side profile on the server."""
    await user_service.save_profile(
        db,
        data.user_id,
        data.profile_data,
        email=data.email,
        name=data.name,
    )
    await db.commit()
    return {"success": True}
