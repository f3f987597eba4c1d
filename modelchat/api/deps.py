from fastapi import Depends, Request

from modelchat.config import Settings, get_settings
from modelchat.services.accounts import AccountService
from modelchat.services.chat import ChatService
from modelchat.services.firestore import FirestoreRepository
from modelchat.services.ollama import OllamaClient
from modelchat.services.registry import ModelRegistry

# Authentication dependency
from .auth import get_current_user  # noqa: F401


# --- Long-lived clients (created in the app lifespan) ---

def get_repo(request: Request) -> FirestoreRepository:
    return request.app.state.repo


def get_inference_client(request: Request) -> OllamaClient:
    return request.app.state.inference_client


# --- Per-request services ---

def get_account_service(
    repo: FirestoreRepository = Depends(get_repo),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(repo, settings)


def get_model_registry(
    repo: FirestoreRepository = Depends(get_repo),
    settings: Settings = Depends(get_settings),
) -> ModelRegistry:
    return ModelRegistry(repo, default_system_prompt=settings.default_system_prompt)


def get_chat_service(
    repo: FirestoreRepository = Depends(get_repo),
    inference: OllamaClient = Depends(get_inference_client),
) -> ChatService:
    return ChatService(repo=repo, inference=inference)
