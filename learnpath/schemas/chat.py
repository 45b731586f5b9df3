"""Chat schemas."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from learnpath.schemas.base import CamelModel


class MessageRole(str, Enum):
    """Who sent the message."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatRequest(CamelModel):
    message: str = Field(min_length=1)


class ChatMessageResponse(CamelModel):
    id: int
    role: MessageRole
    content: str
    created_at: datetime
