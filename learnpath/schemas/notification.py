"""Notification schemas."""

from datetime import datetime

from pydantic import AliasChoices, Field

from learnpath.schemas.base import CamelModel


class NotificationCreate(CamelModel):
    type: str = Field(min_length=1)
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    metadata: dict | None = None


class NotificationUpdate(CamelModel):
    read: bool = True


class NotificationResponse(CamelModel):
    id: int
    type: str
    title: str
    message: str
    # The ORM attribute is ``meta``; the wire name stays ``metadata``
    metadata: dict | None = Field(default=None, validation_alias=AliasChoices("meta", "metadata"))
    read: bool
    created_at: datetime
    updated_at: datetime
