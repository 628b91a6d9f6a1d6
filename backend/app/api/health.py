from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.settings import Settings, get_settings
from app.deps import get_store
from app.services.session_store import SessionStore

router = APIRouter(tags=["health"])


def _check_openai(settings: Settings) -> dict:
    if not settings.OPENAI_API_KEY:
        return {"status": "error", "detail": "OPENAI_API_KEY is not set"}
    return {
        "status": "ok",
        "models": {
            "transcription": settings.TRANSCRIPTION_MODEL,
            "structuring": settings.STRUCTURING_MODEL,
            "embedding": settings.EMBEDDING_MODEL,
        },
    }


def _check_store(store: SessionStore) -> dict:
    return {"status": "ok", "sessions": len(store)}


@router.get("/healthz", include_in_schema=False)
def healthz(
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_store),
) -> dict:
    """
    Combined liveness/readiness endpoint.

    - openai: key present (the key itself is never echoed)
    - store: in-memory session count
    """
    checks = {
        "openai": _check_openai(settings),
        "store": _check_store(store),
    }

    overall = "ok" if all(c["status"] != "error" for c in checks.values()) else "error"

    return {"status": overall, "checks": checks}
