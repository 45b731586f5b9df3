"""API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.auth import get_auth_user
from learnpath.core.database import get_session
from learnpath.models.user import User
from learnpath.services import user_service


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


# Database dependency
DBDep = Annotated[AsyncSession, Depends(get_db)]

# Auth user dependency - user id from the x-user-id header (401 when missing)
CurrentUser = Annotated[str, Depends(get_auth_user)]


async def require_user(db: AsyncSession, user_id: str, email: str | None = None) -> User:
    """Resolve a user by id or email, or raise 404."""
    user = await user_service.resolve_user(db, user_id, email)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found in database",
        )
    return user


def cache_control(max_age: int) -> str:
    return f"private, max-age={max_age}"
