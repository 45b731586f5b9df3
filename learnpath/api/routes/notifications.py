"""Notification routes."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from learnpath.api.deps import CurrentUser, DBDep
from learnpath.core.logging import get_logger
from learnpath.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    NotificationUpdate,
)
from learnpath.services import notification_service, user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_json(notification) -> dict:
    return NotificationResponse.model_validate(notification).to_json()


async def _get_owned(db: DBDep, user_id: str, notification_id: int):
    notification = await notification_service.get_user_notification(db, user_id, notification_id)
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return notification


@router.get("")
async def list_notifications(
    user_id: CurrentUser,
    db: DBDep,
    unread_only: Annotated[bool, Query(alias="unreadOnly")] = False,
) -> dict:
    """List the caller's notifications, newest first."""
    user = await user_service.get_or_create_user(db, user_id)
    await db.commit()

    notifications = await notification_service.list_notifications(db, user.id, unread_only)
    unread_count = await notification_service.count_unread(db, user.id)
    return {
        "notifications": [_notification_json(n) for n in notifications],
        "unreadCount": unread_count,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_notification(data: NotificationCreate, user_id: CurrentUser, db: DBDep) -> dict:
    user = await user_service.get_or_create_user(db, user_id)
    notification = await notification_service.create_notification(
        db,
        user.id,
        type=data.type,
        title=data.title,
        message=data.message,
        metadata=data.metadata,
    )
    await db.commit()
    return {"notification": _notification_json(notification)}


@router.put("/read-all")
async def mark_all_read(user_id: CurrentUser, db: DBDep) -> dict:
    """Mark every notification of the caller as read."""
    updated = await notification_service.mark_all_read(db, user_id)
    await db.commit()
    return {"success": True, "updated": updated}


@router.put("/{notification_id}")
async def update_notification(
    notification_id: int,
    user_id: CurrentUser,
    db: DBDep,
    data: NotificationUpdate | None = None,
) -> dict:
    """Set the read flag (defaults to read)."""
    notification = await _get_owned(db, user_id, notification_id)
    read = data.read if data else True
    await notification_service.mark_read(db, notification, read)
    await db.commit()
    return {"notification": _notification_json(notification)}


@router.delete("/{notification_id}")
async def delete_notification(notification_id: int, user_id: CurrentUser, db: DBDep) -> dict:
    notification = await _get_owned(db, user_id, notification_id)
    await notification_service.delete_notification(db, notification)
    await db.commit()
    return {"success": True}
