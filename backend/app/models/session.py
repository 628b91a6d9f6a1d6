from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.schemas.sessions import SessionRead, Speaker, Turn


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionRecord(BaseModel):
    """
    One completed transcription + enrichment result.

    Records are immutable once built. ``vectorized`` is derived from
    ``embedding`` and cannot be passed in.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    filename: str = "session.wav"
    transcript: str = ""
    summary: str
    speakers: tuple[Speaker, ...] = Field(..., min_length=2)
    turns: tuple[Turn, ...] = Field(..., min_length=1)
    embedding: tuple[float, ...] = ()
    created_at: datetime = Field(default_factory=_utcnow)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def vectorized(self) -> bool:
        return len(self.embedding) > 0

    def to_public(self) -> SessionRead:
        return SessionRead(
            id=self.id,
            filename=self.filename,
            summary=self.summary,
            transcript=self.transcript,
            speakers=list(self.speakers),
            turns=list(self.turns),
            vectorized=self.vectorized,
            created_at=self.created_at,
        )
