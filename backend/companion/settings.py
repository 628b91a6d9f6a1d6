from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class CompanionSettings(BaseSettings):
    # Origin allowed to call this service from the browser.
    FRONTEND_URL: str = "http://localhost:3000"
    PORT: int = 3000

    # Supabase (optional wrapper; the service refuses to start without both)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
