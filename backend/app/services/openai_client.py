from __future__ import annotations

from openai import AsyncOpenAI

from app.core.settings import Settings
from app.logging_utils import get_logger

log = get_logger(__name__)


def build_openai_client(settings: Settings) -> AsyncOpenAI | None:
    """
    Return an AsyncOpenAI client, or None when no API key is configured.

    Retries are disabled: every pipeline stage is a single attempt. The
    timeout stays unset unless OPENAI_TIMEOUT_SECONDS is provided.
    """
    key = settings.OPENAI_API_KEY
    if not key:
        return None

    log.debug(
        "openai client configured",
        extra={
            "base_url": settings.OPENAI_BASE_URL or "default",
            "timeout_s": settings.OPENAI_TIMEOUT_SECONDS,
        },
    )
    return AsyncOpenAI(
        api_key=key,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
        max_retries=0,
    )
