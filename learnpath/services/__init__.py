"""Service layer modules."""

from learnpath.services import (
    chat_service,
    notification_service,
    progress_service,
    roadmap_service,
    user_service,
)

__all__ = [
    "chat_service",
    "notification_service",
    "progress_service",
    "roadmap_service",
    "user_service",
]
