import datetime as _dt
import hashlib
import logging
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore

from ..errors import ChatNotFound, DuplicateModelName, DuplicateUsername, ModelNotFound
from ..models.domain import AiModel, Chat, ChatMessage, User

logger = logging.getLogger(__name__)

_USERS = "users"
_USERNAMES = "usernames"
_CHATS = "chats"
_MODELS = "ai_models"
_MODEL_NAMES = "model_names"


def _claim_id(value: str) -> str:
    """Document id for a uniqueness claim; raw names may contain '/'."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _message_payload(message: ChatMessage) -> Dict[str, Any]:
    return {
        "text": message.text,
        "isAi": message.isAi,
        "timestamp": message.timestamp or _dt.datetime.now(_dt.timezone.utc),
    }


class FirestoreRepository:
    """Repository for users, chats and AI models stored in Firestore.

    Every chat and model lookup takes the owner's user id; a document owned by
    somebody else is indistinguishable from a missing one.
    """

    def __init__(self, client: firestore.Client, default_chat_title: str = "New Chat") -> None:
        self.db = client
        self.default_chat_title = default_chat_title
        self._users = self.db.collection(_USERS)
        self._usernames = self.db.collection(_USERNAMES)
        self._chats = self.db.collection(_CHATS)
        self._models = self.db.collection(_MODELS)
        self._model_names = self.db.collection(_MODEL_NAMES)

    def close(self) -> None:
        self.db.close()

    # --------------------------------------------------------------------- #
    # Users
    # --------------------------------------------------------------------- #
    def create_user(self, username: str, password_hash: str) -> User:
        """Stores a new user; the username claim and the user land in one batch."""
        now = _dt.datetime.now(_dt.timezone.utc)
        user_ref = self._users.document()
        user_data = {"username": username, "password": password_hash, "createdAt": now}

        batch = self.db.batch()
        batch.create(self._usernames.document(_claim_id(username)), {"userId": user_ref.id})
        batch.set(user_ref, user_data)
        try:
            batch.commit()
        except AlreadyExists:
            raise DuplicateUsername()

        logger.info("Created user %s", user_ref.id)
        return User(id=user_ref.id, **user_data)

    def find_user_by_username(self, username: str) -> Optional[User]:
        docs = self._users.where("username", "==", username).limit(1).get()
        if not docs:
            return None
        return User(id=docs[0].id, **docs[0].to_dict())

    # --------------------------------------------------------------------- #
    # AI models
    # --------------------------------------------------------------------- #
    def create_model(self, owner: str, name: str, model_name: str, system_prompt: str) -> AiModel:
        model_ref = self._models.document()
        model_data = {
            "name": name,
            "modelName": model_name,
            "systemPrompt": system_prompt,
            "userId": owner,
        }

        batch = self.db.batch()
        batch.create(self._model_names.document(_claim_id(name)), {"modelId": model_ref.id})
        batch.set(model_ref, model_data)
        try:
            batch.commit()
        except AlreadyExists:
            raise DuplicateModelName()

        logger.info("Created AI model %s (%s) for user %s", model_ref.id, model_name, owner)
        return AiModel(id=model_ref.id, **model_data)

    def list_models(self, owner: str) -> List[AiModel]:
        docs = self._models.where("userId", "==", owner).stream()
        return [AiModel(id=doc.id, **doc.to_dict()) for doc in docs]

    def get_model(self, owner: str, model_id: str) -> AiModel:
        try:
            snapshot = self._models.document(model_id).get()
        except ValueError:
            # not a valid document id, e.g. contains "/"
            raise ModelNotFound()
        if not snapshot.exists:
            raise ModelNotFound()
        data = snapshot.to_dict()
        if data.get("userId") != owner:
            raise ModelNotFound()
        return AiModel(id=snapshot.id, **data)

    def delete_model(self, owner: str, model_id: str) -> bool:
        """Deletes the model and frees its name. Returns False when nothing matched."""
        try:
            model = self.get_model(owner, model_id)
        except ModelNotFound:
            return False

        batch = self.db.batch()
        batch.delete(self._models.document(model.id))
        batch.delete(self._model_names.document(_claim_id(model.name)))
        batch.commit()
        logger.info("Deleted AI model %s", model.id)
        return True

    # --------------------------------------------------------------------- #
    # Chats
    # --------------------------------------------------------------------- #
    def list_chats(self, owner: str) -> List[Chat]:
        docs = self._chats.where("userId", "==", owner).stream()
        return [Chat(id=doc.id, **doc.to_dict()) for doc in docs]

    def get_chat(self, owner: str, chat_id: str) -> Chat:
        try:
            snapshot = self._chats.document(chat_id).get()
        except ValueError:
            raise ChatNotFound()
        if not snapshot.exists:
            raise ChatNotFound()
        data = snapshot.to_dict()
        if data.get("userId") != owner:
            raise ChatNotFound()
        return Chat(id=snapshot.id, **data)

    def create_chat(self, owner: str, messages: List[ChatMessage]) -> Chat:
        """Creates a chat holding ``messages`` with a single write."""
        chat_ref = self._chats.document()
        chat_data = {
            "userId": owner,
            "messages": [_message_payload(m) for m in messages],
            "title": self.default_chat_title,
            "createdAt": _dt.datetime.now(_dt.timezone.utc),
        }
        chat_ref.set(chat_data)
        logger.info("Created chat %s for user %s", chat_ref.id, owner)
        return Chat(id=chat_ref.id, **chat_data)

    def append_messages(self, chat_id: str, messages: List[ChatMessage]) -> None:
        """Atomically appends ``messages`` to the end of the chat's message list."""
        chat_ref = self._chats.document(chat_id)
        chat_ref.update({"messages": firestore.ArrayUnion([_message_payload(m) for m in messages])})

    def delete_chat(self, owner: str, chat_id: str) -> None:
        chat = self.get_chat(owner, chat_id)
        self._chats.document(chat.id).delete()
        logger.info("Deleted chat %s", chat.id)
