# backend/app/deps.py
from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from app.core.errors import ConfigurationError
from app.core.settings import Settings, get_settings
from app.pipeline.ingest import SessionIngestor
from app.services.openai_client import build_openai_client
from app.services.session_store import SessionStore


def get_store(request: Request) -> SessionStore:
    """The one store owned by the running app (created at startup)."""
    return request.app.state.session_store


def get_openai_client(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    Build the provider client on first use and keep it on app.state so its
    connection pool is shared; a missing key is reported as a 400 on every
    request instead of failing startup.
    """
    client = getattr(request.app.state, "openai_client", None)
    if client is not None:
        return client
    client = build_openai_client(settings)
    if client is None:
        raise ConfigurationError("OPENAI_API_KEY is not set")
    request.app.state.openai_client = client
    return client


def get_ingestor(
    client: Any = Depends(get_openai_client),
    store: SessionStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> SessionIngestor:
    return SessionIngestor(client=client, store=store, settings=settings)


__all__ = ["get_store", "get_openai_client", "get_ingestor"]
