from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_FILENAME = "session.wav"
DEFAULT_CONTENT_TYPE = "audio/wav"


@dataclass(frozen=True)
class UploadedAudio:
    data: bytes
    filename: str = DEFAULT_FILENAME
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_upload(cls, data: bytes, filename: str | None, content_type: str | None) -> "UploadedAudio":
        return cls(
            data=data,
            filename=filename or DEFAULT_FILENAME,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )


async def transcribe_audio(client: Any, audio: UploadedAudio, *, model: str) -> str:
    """
    Send the raw upload to the speech-to-text endpoint and return plain text.

    An empty transcript is a valid result. Provider errors propagate.
    """
    result = await client.audio.transcriptions.create(
        file=(audio.filename, audio.data, audio.content_type),
        model=model,
    )
    return getattr(result, "text", None) or ""
