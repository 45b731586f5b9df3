"""Learning assistant chat routes."""

from fastapi import APIRouter

from learnpath.agent.assistant import chat_reply
from learnpath.api.deps import CurrentUser, DBDep
from learnpath.core.config import get_settings
from learnpath.core.logging import get_logger
from learnpath.schemas.chat import ChatMessageResponse, ChatRequest, MessageRole
from learnpath.services import chat_service, user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("")
async def send_message(data: ChatRequest, user_id: CurrentUser, db: DBDep) -> dict:
    """Save the user's turn, answer it and save the reply."""
    user = await user_service.get_or_create_user(db, user_id)
    user_message = await chat_service.save_message(db, user.id, MessageRole.USER, data.message)
    # Persist the user's turn even if generating the reply fails later
    await db.commit()

    window = await chat_service.get_recent_messages(
        db, user.id, get_settings().CHAT_HISTORY_WINDOW, before_id=user_message.id
    )
    context = await chat_service.build_context(db, user)
    reply = await chat_reply(
        data.message,
        [(message.role, message.content) for message in window],
        context,
    )

    saved = await chat_service.save_message(db, user.id, MessageRole.ASSISTANT, reply)
    await db.commit()

    logger.info("Chat turn completed", user_id=user.id, message_id=saved.id)
    return {"message": reply, "id": saved.id}


@router.get("")
async def get_history(user_id: CurrentUser, db: DBDep) -> dict:
    """Full chat history, oldest first."""
    user = await user_service.get_or_create_user(db, user_id)
    await db.commit()

    messages = await chat_service.get_history(db, user.id)
    return {"messages": [ChatMessageResponse.model_validate(m).to_json() for m in messages]}
