"""User service for account lookup and profile storage."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.logging import get_logger
from learnpath.models.user import User
from learnpath.schemas.profile import LearnerProfile

logger = get_logger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def resolve_user(
    db: AsyncSession,
    user_id: str | None,
    email: str | None = None,
) -> User | None:
    """Find a user by id, then by email.

    Returns:
        The user, or None when neither lookup matches
    """
    if user_id:
        user = await get_user(db, user_id)
        if user:
            return user
    if email:
        user = await get_user_by_email(db, email)
        if user:
            logger.debug("User resolved by email", user_id=user_id, resolved_id=user.id)
            return user
    return None


async def create_user(
    db: AsyncSession,
    user_id: str,
    email: str | None = None,
    name: str | None = None,
) -> User:
    """Create a user record.

    Note: This function assumes the caller will commit the transaction.
    """
    user = User(id=user_id, email=email, name=name)
    db.add(user)
    await db.flush()
    logger.info("User created", user_id=user_id)
    return user


async def get_or_create_user(
    db: AsyncSession,
    user_id: str | None,
    email: str | None = None,
    name: str | None = None,
) -> User:
    """Resolve a user, creating a placeholder when unknown.

    Placeholders get ``user_<id>@localhost`` when no email is supplied.
    Without a ``user_id`` the email doubles as the id.
    """
    user = await resolve_user(db, user_id, email)
    if user:
        return user

    new_id = user_id or email
    if not new_id:
        raise ValueError("userId or email is required")

    # Another account may already own the email; keep the placeholder address then
    if email and await get_user_by_email(db, email):
        email = None
    return await create_user(
        db,
        new_id,
        email=email or f"user_{new_id}@localhost",
        name=name or f"User {new_id[:8]}",
    )


async def save_profile(
    db: AsyncSession,
    user_id: str,
    profile: LearnerProfile,
    email: str | None = None,
    name: str | None = None,
) -> User:
    """Store the learner profile, creating the user on first save."""
    user = await get_or_create_user(db, user_id, email=email, name=name)
    user.profile = profile.model_dump(mode="json", by_alias=True)
    if name:
        user.name = name
    await db.flush()

    logger.info("Profile saved", user_id=user.id)
    return user


def get_profile(user: User) -> LearnerProfile | None:
    if not user.profile:
        return None
    return LearnerProfile.model_validate(user.profile)
