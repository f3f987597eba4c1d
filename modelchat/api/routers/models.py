import logging
from typing import List

from fastapi import APIRouter, Depends, Path, status

from modelchat.api.deps import get_current_user, get_model_registry
from modelchat.errors import InternalError, ServiceError
from modelchat.models.domain import AiModel, CreateModelRequest, MessageResponse
from modelchat.services.registry import ModelRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])

# plain def: blocking Firestore calls run in the threadpool


@router.post("", response_model=AiModel, status_code=status.HTTP_201_CREATED)
def create_model(
    body: CreateModelRequest,
    user=Depends(get_current_user),
    registry: ModelRegistry = Depends(get_model_registry),
):
    try:
        return registry.create(user["user_id"], body.name, body.modelName, body.systemPrompt)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error creating AI model: {e}", exc_info=True)
        raise InternalError("Error creating AI model")


@router.get("", response_model=List[AiModel])
def list_models(
    user=Depends(get_current_user),
    registry: ModelRegistry = Depends(get_model_registry),
):
    try:
        return registry.list(user["user_id"])
    except Exception as e:
        logger.error(f"Error fetching AI models: {e}", exc_info=True)
        raise InternalError("Error fetching AI models")


@router.delete("/{model_id}", response_model=MessageResponse)
def delete_model(
    model_id: str = Path(..., title="The ID of the AI model to delete"),
    user=Depends(get_current_user),
    registry: ModelRegistry = Depends(get_model_registry),
):
    """Deletes one of the caller's models; unknown ids succeed silently."""
    try:
        registry.delete(user["user_id"], model_id)
    except Exception as e:
        logger.error(f"Error deleting AI model {model_id}: {e}", exc_info=True)
        raise InternalError("Error deleting AI model")
    return MessageResponse(message="Model deleted successfully")
