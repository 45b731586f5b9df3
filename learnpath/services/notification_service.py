"""Notification service for per-user event records."""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.logging import get_logger
from learnpath.models.notification import Notification

logger = get_logger(__name__)


async def create_notification(
    db: AsyncSession,
    user_id: str,
    type: str,
    title: str,
    message: str,
    metadata: dict | None = None,
) -> Notification:
    """Create a notification.

    Note: This function assumes the caller will commit the transaction.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        meta=metadata,
    )
    db.add(notification)
    await db.flush()

    logger.info("Notification created", notification_id=notification.id, type=type, user_id=user_id)
    return notification


async def try_create_notification(db: AsyncSession, user_id: str, **fields) -> Notification | None:
    """Create a notification as a side effect; failures are logged, not raised."""
    try:
        return await create_notification(db, user_id, **fields)
    except Exception as e:
        logger.warning(
            "Failed to create notification",
            type=fields.get("type"),
            user_id=user_id,
            error=str(e),
        )
        return None


async def list_notifications(
    db: AsyncSession,
    user_id: str,
    unread_only: bool = False,
) -> list[Notification]:
    """Get a user's notifications, newest first."""
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    result = await db.execute(stmt.order_by(Notification.created_at.desc(), Notification.id.desc()))
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.read.is_(False),
        )
    )
    return result.scalar() or 0


async def get_user_notification(
    db: AsyncSession,
    user_id: str,
    notification_id: int,
) -> Notification | None:
    """Get a notification only if ``user_id`` owns it."""
    notification = await db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        return None
    return notification


async def mark_read(
    db: AsyncSession,
    notification: Notification,
    read: bool = True,
) -> Notification:
    notification.read = read
    await db.flush()
    return notification


async def mark_all_read(db: AsyncSession, user_id: str) -> int:
    """Mark every unread notification of a user as read.

    Returns:
        Number of notifications updated
    """
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
        .execution_options(synchronize_session="fetch")
    )
    logger.info("Notifications marked read", user_id=user_id, count=result.rowcount)
    return result.rowcount


async def delete_notification(db: AsyncSession, notification: Notification) -> None:
    await db.delete(notification)
    await db.flush()
    logger.info("Notification deleted", notification_id=notification.id)
