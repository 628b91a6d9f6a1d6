from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ------------------------------------------------------------------
    # OpenAI (transcription, structuring, embeddings)
    # ------------------------------------------------------------------
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    # Unset means the outbound calls never time out.
    OPENAI_TIMEOUT_SECONDS: float | None = None

    TRANSCRIPTION_MODEL: str = "whisper-1"
    STRUCTURING_MODEL: str = "gpt-4.1-mini"
    STRUCTURING_TEMPERATURE: float = 0.2
    EMBEDDING_MODEL: str = "text-embedding-3-small"

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Instantiate once for the whole app; FastAPI dependency."""
    return Settings()
