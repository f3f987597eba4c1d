"""Chat service – chat CRUD helpers + the inference relay."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import anyio

from ..errors import ChatNotFound, InferenceFailed, ModelNotFound
from ..models.domain import Chat, ChatMessage
from .firestore import FirestoreRepository
from .ollama import OllamaClient

logger = logging.getLogger(__name__)


class ChatService:
    """Handles chat sessions and relays messages to the inference service."""

    def __init__(self, repo: FirestoreRepository, inference: OllamaClient):
        self.repo = repo
        self.inference = inference

    # ─────────────────────────── Chat/session helpers ───────────────────────────
    def list_chats(self, owner: str) -> List[Chat]:
        return self.repo.list_chats(owner)

    def delete_chat(self, owner: str, chat_id: str) -> None:
        self.repo.delete_chat(owner, chat_id)

    # ──────────────────────────────── Relay ─────────────────────────────────────
    async def relay(
        self,
        owner: str,
        message: str,
        model_id: str,
        chat_id: Optional[str] = None,
    ) -> Tuple[str, str]:
        """Send ``message`` to the model and record both sides of the exchange.

        The order is:
        1. Resolve the model and (if given) the chat, both scoped to ``owner``.
        2. Call the inference service with the model's system prompt.
        3. Persist the user message and the reply in one write: a new chat
           document, or an atomic append to the existing one.

        Nothing is written if any step before the final write fails.

        Returns ``(reply_text, chat_id)``.
        """
        try:
            model = self.repo.get_model(owner, model_id)
            chat = self.repo.get_chat(owner, chat_id) if chat_id else None

            user_msg = ChatMessage(text=message, isAi=False, timestamp=datetime.now(timezone.utc))
            prompt = [
                {"role": "system", "content": model.systemPrompt},
                {"role": "user", "content": message},
            ]

            # blocking HTTP call; keep it off the event loop
            reply = await anyio.to_thread.run_sync(self.inference.chat, model.modelName, prompt)
            ai_msg = ChatMessage(text=reply, isAi=True, timestamp=datetime.now(timezone.utc))

            if chat is None:
                chat = self.repo.create_chat(owner, [user_msg, ai_msg])
            else:
                self.repo.append_messages(chat.id, [user_msg, ai_msg])

        except (ModelNotFound, ChatNotFound):
            raise
        except Exception as exc:
            logger.error("Relay failed for model %s: %s", model_id, exc, exc_info=True)
            raise InferenceFailed() from exc

        return reply, chat.id
