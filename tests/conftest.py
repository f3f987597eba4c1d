import datetime as _dt
import itertools
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from modelchat.api.deps import get_inference_client, get_repo
from modelchat.api.main import create_app
from modelchat.config import Settings, get_settings
from modelchat.errors import ChatNotFound, DuplicateModelName, DuplicateUsername, ModelNotFound
from modelchat.models.domain import AiModel, Chat, ChatMessage, User


class InMemoryRepository:
    """Dict-backed stand-in for FirestoreRepository with the same contract."""

    def __init__(self, default_chat_title: str = "New Chat"):
        self.default_chat_title = default_chat_title
        self.users: Dict[str, User] = {}
        self.models: Dict[str, AiModel] = {}
        self.chats: Dict[str, Chat] = {}
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def close(self) -> None:
        pass

    def create_user(self, username: str, password_hash: str) -> User:
        if self.find_user_by_username(username) is not None:
            raise DuplicateUsername()
        user = User(
            id=self._next_id("user-"),
            username=username,
            password=password_hash,
            createdAt=_dt.datetime.now(_dt.timezone.utc),
        )
        self.users[user.id] = user
        return user

    def find_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_model(self, owner: str, name: str, model_name: str, system_prompt: str) -> AiModel:
        if any(m.name == name for m in self.models.values()):
            raise DuplicateModelName()
        model = AiModel(
            id=self._next_id("model-"),
            name=name,
            modelName=model_name,
            systemPrompt=system_prompt,
            userId=owner,
        )
        self.models[model.id] = model
        return model

    def list_models(self, owner: str) -> List[AiModel]:
        return [m for m in self.models.values() if m.userId == owner]

    def get_model(self, owner: str, model_id: str) -> AiModel:
        model = self.models.get(model_id)
        if model is None or model.userId != owner:
            raise ModelNotFound()
        return model

    def delete_model(self, owner: str, model_id: str) -> bool:
        try:
            self.get_model(owner, model_id)
        except ModelNotFound:
            return False
        del self.models[model_id]
        return True

    def list_chats(self, owner: str) -> List[Chat]:
        return [c for c in self.chats.values() if c.userId == owner]

    def get_chat(self, owner: str, chat_id: str) -> Chat:
        chat = self.chats.get(chat_id)
        if chat is None or chat.userId != owner:
            raise ChatNotFound()
        return chat.model_copy(deep=True)

    def create_chat(self, owner: str, messages: List[ChatMessage]) -> Chat:
        chat = Chat(
            id=self._next_id("chat-"),
            userId=owner,
            messages=list(messages),
            title=self.default_chat_title,
            createdAt=_dt.datetime.now(_dt.timezone.utc),
        )
        self.chats[chat.id] = chat
        return chat

    def append_messages(self, chat_id: str, messages: List[ChatMessage]) -> None:
        self.chats[chat_id].messages.extend(messages)

    def delete_chat(self, owner: str, chat_id: str) -> None:
        self.get_chat(owner, chat_id)
        del self.chats[chat_id]


class StubInference:
    """Records chat calls and answers with a canned reply or an error."""

    def __init__(self):
        self.calls = []
        self.error: Optional[Exception] = None

    def chat(self, model: str, messages: List[Dict[str, str]]) -> str:
        self.calls.append({"model": model, "messages": messages})
        if self.error is not None:
            raise self.error
        return f"reply to: {messages[-1]['content']}"

    def close(self) -> None:
        pass


@pytest.fixture
def settings():
    return Settings(
        secret_key="test-secret-key-with-at-least-32-bytes",
        bcrypt_rounds=4,
    )


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def inference():
    return StubInference()


@pytest.fixture
def client(settings, repo, inference):
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_repo] = lambda: repo
    app.dependency_overrides[get_inference_client] = lambda: inference
    # not entered as a context manager: the lifespan (real Firestore) never starts
    return TestClient(app)


def register_and_login(client, username="alice", password="pw123") -> Dict[str, str]:
    """Returns Authorization headers for a freshly registered user."""
    assert client.post("/api/register", json={"username": username, "password": password}).status_code == 201
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def alice(client):
    return register_and_login(client, "alice", "pw123")


@pytest.fixture
def bob(client):
    return register_and_login(client, "bob", "hunter2")
