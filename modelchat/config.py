from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Firestore ---
    google_cloud_project: Optional[str] = None
    firestore_database: str = "(default)"

    # --- Auth ---
    secret_key: str = "dev-secret-key-change-me-before-deploying"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60
    bcrypt_rounds: int = 10

    # --- Inference (Ollama-compatible) ---
    ollama_url: str = "http://localhost:11434"
    ollama_timeout_secs: Optional[float] = None  # None waits indefinitely

    # --- Chat / model defaults ---
    default_system_prompt: str = "You are a helpful AI assistant."
    default_chat_title: str = "New Chat"

    # --- HTTP ---
    cors_origins: str = "*"  # comma-separated
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated CORS origins to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
