import logging
from typing import List

from fastapi import APIRouter, Depends, Path

from modelchat.api.deps import get_chat_service, get_current_user
from modelchat.errors import InternalError, ServiceError
from modelchat.models.domain import Chat, ChatReply, ChatRequest, MessageResponse
from modelchat.services.chat import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chats"])

# store-only routes are plain def so the blocking Firestore calls run in the threadpool


@router.get("/chats", response_model=List[Chat])
def get_chat_list(
    user=Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
):
    """Retrieves every chat owned by the caller, messages included."""
    try:
        return chats.list_chats(user["user_id"])
    except Exception as e:
        logger.error(f"Error listing chats: {e}", exc_info=True)
        raise InternalError("Error fetching chats")


@router.delete("/chat/{chat_id}", response_model=MessageResponse)
def delete_chat_session(
    chat_id: str = Path(..., title="The ID of the chat session to delete"),
    user=Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
):
    try:
        chats.delete_chat(user["user_id"], chat_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error deleting chat {chat_id}: {e}", exc_info=True)
        raise InternalError("Error deleting chat")
    return MessageResponse(message="Chat deleted successfully")


@router.post("/chat", response_model=ChatReply)
async def post_message(
    body: ChatRequest,
    user=Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
):
    """
    Sends a user message to the selected model, stores both the message and
    the model's reply on the chat (a new one when no chatId is given), and
    returns the reply with the chat id.
    """
    reply, chat_id = await chats.relay(
        owner=user["user_id"],
        message=body.message,
        model_id=body.modelId,
        chat_id=body.chatId,
    )
    return ChatReply(response=reply, chatId=chat_id)
