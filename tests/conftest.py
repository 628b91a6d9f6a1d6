from __future__ import annotations

import json
import os
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

# -----------------------------------------------------------------------------
# Environment defaults for tests
# -----------------------------------------------------------------------------

# Never let a developer's real key leak into a test run.
os.environ.pop("OPENAI_API_KEY", None)

from app.core.settings import Settings, get_settings  # noqa: E402
from app.deps import get_openai_client  # noqa: E402
from app.main import app  # noqa: E402
from app.services.session_store import SessionStore  # noqa: E402

STRUCTURED = {
    "summary": "Client discussed sleep issues and agreed to keep a journal.",
    "speakers": [
        {"name": "Therapist", "role": "Therapist"},
        {"name": "Client", "role": "Client", "note": "first visit"},
    ],
    "turns": [
        {"speaker": "Therapist", "text": "How have you been sleeping?"},
        {"speaker": "Client", "text": "Not great, maybe four hours."},
        {"speaker": "Therapist", "text": "Let's try a sleep journal."},
        {"speaker": "Client", "text": "Okay, I can do that."},
    ],
}


class FakeOpenAI:
    """
    Stand-in for AsyncOpenAI exposing only the three calls the pipeline makes.

    Set ``*_error`` to an exception instance to make that call raise.
    """

    def __init__(
        self,
        transcript: str = "How have you been sleeping? Not great.",
        completion: str | None = json.dumps(STRUCTURED),
        embedding: list[float] | None = None,
    ) -> None:
        self.transcript = transcript
        self.completion = completion
        self.embedding = [0.1, 0.2, 0.3] if embedding is None else embedding
        self.transcription_error: Exception | None = None
        self.completion_error: Exception | None = None
        self.embedding_error: Exception | None = None
        self.calls: dict[str, list[dict[str, Any]]] = {
            "transcribe": [],
            "complete": [],
            "embed": [],
        }

        self.audio = SimpleNamespace(transcriptions=SimpleNamespace(create=self._transcribe))
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._complete))
        self.embeddings = SimpleNamespace(create=self._embed)

    async def _transcribe(self, **kwargs: Any) -> Any:
        self.calls["transcribe"].append(kwargs)
        if self.transcription_error:
            raise self.transcription_error
        return SimpleNamespace(text=self.transcript)

    async def _complete(self, **kwargs: Any) -> Any:
        self.calls["complete"].append(kwargs)
        if self.completion_error:
            raise self.completion_error
        message = SimpleNamespace(content=self.completion)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def _embed(self, **kwargs: Any) -> Any:
        self.calls["embed"].append(kwargs)
        if self.embedding_error:
            raise self.embedding_error
        return SimpleNamespace(data=[SimpleNamespace(embedding=self.embedding)])


# -----------------------------------------------------------------------------
# Test client + helpers
# -----------------------------------------------------------------------------


@pytest.fixture()
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture()
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture()
def client(fake_openai, store):
    app.state.session_store = store
    app.state.openai_client = None
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, OPENAI_API_KEY="sk-test"
    )
    app.dependency_overrides[get_openai_client] = lambda: fake_openai
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def client_without_key(store):
    """Real client factory, but with no OPENAI_API_KEY configured."""
    app.state.session_store = store
    app.state.openai_client = None
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, OPENAI_API_KEY=None
    )
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def audio_file():
    return {"file": ("session-01.wav", b"RIFF....WAVEfmt fake-audio", "audio/wav")}
