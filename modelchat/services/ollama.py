"""Blocking client for an Ollama-compatible ``/api/chat`` endpoint."""

import logging
from typing import Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class InferenceError(Exception):
    """The inference service answered with something other than a chat reply."""


class OllamaClient:
    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def chat(self, model: str, messages: List[Dict[str, str]]) -> str:
        """Send a non-streaming chat request and return the assistant's text."""
        payload = {"model": model, "messages": messages, "stream": False}
        logger.debug("POST %s/api/chat model=%s", self.base_url, model)

        response = self.session.post(f"{self.base_url}/api/chat", json=payload, timeout=self.timeout)
        response.raise_for_status()

        try:
            content = response.json()["message"]["content"]
        except (ValueError, KeyError, TypeError) as exc:
            raise InferenceError(f"Unexpected response from inference service: {exc}") from exc
        if not isinstance(content, str):
            raise InferenceError("Inference service returned non-text content")
        return content

    def close(self) -> None:
        self.session.close()
