"""Database models."""

from learnpath.models.chat import ChatMessage
from learnpath.models.notification import Notification
from learnpath.models.progress import Progress
from learnpath.models.roadmap import Roadmap, Step
from learnpath.models.user import User

__all__ = [
    "User",
    "Roadmap",
    "Step",
    "Progress",
    "Notification",
    "ChatMessage",
]
