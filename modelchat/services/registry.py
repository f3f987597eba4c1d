from typing import List, Optional

from ..models.domain import AiModel
from .firestore import FirestoreRepository


class ModelRegistry:
    """Per-user AI model configurations (inference model + system prompt)."""

    def __init__(self, repo: FirestoreRepository, default_system_prompt: str):
        self.repo = repo
        self.default_system_prompt = default_system_prompt

    def create(self, owner: str, name: str, model_name: str, system_prompt: Optional[str] = None) -> AiModel:
        if system_prompt is None:
            system_prompt = self.default_system_prompt
        return self.repo.create_model(owner, name, model_name, system_prompt)

    def list(self, owner: str) -> List[AiModel]:
        return self.repo.list_models(owner)

    def delete(self, owner: str, model_id: str) -> None:
        # absent and foreign models are both a silent no-op
        self.repo.delete_model(owner, model_id)
