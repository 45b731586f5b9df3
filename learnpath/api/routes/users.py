"""User account routes."""

from fastapi import APIRouter, HTTPException, status

from learnpath.api.deps import DBDep
from learnpath.core.logging import get_logger
from learnpath.schemas.profile import CreateUserRequest
from learnpath.services import user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["users"])


@router.post("/create-user")
async def create_user(data: CreateUserRequest, db: DBDep) -> dict:
    """Register (or update) a user signed up through the identity provider."""
    owner = await user_service.get_user_by_email(db, data.email)
    if owner and owner.id != data.uid:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = await user_service.get_user(db, data.uid)
    if user:
        user.email = data.email
        if data.name:
            user.name = data.name
    else:
        await user_service.create_user(db, data.uid, email=data.email, name=data.name)
    await db.commit()

    logger.info("User registered", user_id=data.uid)
    return {"success": True, "message": "User created successfully", "uid": data.uid}
