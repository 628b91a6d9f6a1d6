from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Speaker(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    note: Optional[str] = None


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)
    speaker: str = Field(..., min_length=1)
    text: str


class SessionRead(BaseModel):
    """Public session record: everything except the embedding vector."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
    id: str
    filename: str
    summary: str
    transcript: str
    speakers: list[Speaker]
    turns: list[Turn]
    vectorized: bool
    created_at: datetime


class SessionList(BaseModel):
    sessions: list[SessionRead]


class ErrorBody(BaseModel):
    error: str
