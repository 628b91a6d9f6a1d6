from __future__ import annotations

from typing import Any

from app.core.errors import TranscriptionFailed
from app.core.settings import Settings
from app.logging_utils import get_logger
from app.metrics import SESSIONS_CREATED, SESSIONS_FAILED
from app.models.session import SessionRecord
from app.pipeline.stages import Stage, run_stage
from app.schemas.sessions import SessionRead
from app.services.embedding import choose_embedding_input, embed_text
from app.services.session_store import SessionStore
from app.services.structuring import (
    FallbackStructuring,
    Structuring,
    fallback_structuring,
    parse_structuring,
    request_structuring,
)
from app.services.transcription import UploadedAudio, transcribe_audio

log = get_logger(__name__)


class SessionIngestor:
    """
    upload -> transcribe -> structure -> embed -> store.

    Transcription is mandatory; structuring and embedding are best-effort
    and fall back to defaults instead of failing the request.
    """

    def __init__(self, client: Any, store: SessionStore, settings: Settings) -> None:
        self.client = client
        self.store = store
        self.settings = settings

        self.transcribe: Stage[UploadedAudio, str] = Stage(
            name="transcribe",
            run=self._transcribe,
            failure=TranscriptionFailed,
        )
        self.structure: Stage[str, Structuring] = Stage(
            name="structure",
            run=self._structure,
            fallback=fallback_structuring,
            degraded=lambda result: isinstance(result, FallbackStructuring),
        )
        self.embed: Stage[str, list[float]] = Stage(
            name="embed",
            run=self._embed,
            fallback=lambda _text: [],
            degraded=lambda vector: not vector,
        )

    async def _transcribe(self, audio: UploadedAudio) -> str:
        return await transcribe_audio(
            self.client, audio, model=self.settings.TRANSCRIPTION_MODEL
        )

    async def _structure(self, transcript: str) -> Structuring:
        raw = await request_structuring(
            self.client,
            transcript,
            model=self.settings.STRUCTURING_MODEL,
            temperature=self.settings.STRUCTURING_TEMPERATURE,
        )
        return parse_structuring(raw, transcript)

    async def _embed(self, text: str) -> list[float]:
        return await embed_text(self.client, text, model=self.settings.EMBEDDING_MODEL)

    async def ingest(self, audio: UploadedAudio) -> SessionRead:
        log_extra = {"upload_filename": audio.filename, "bytes": len(audio.data)}
        try:
            transcript = await run_stage(self.transcribe, audio, **log_extra)
        except TranscriptionFailed:
            SESSIONS_FAILED.inc({"stage": "transcribe"})
            raise

        structuring = await run_stage(self.structure, transcript, **log_extra)
        embedding = await run_stage(
            self.embed,
            choose_embedding_input(structuring.summary, transcript),
            **log_extra,
        )
        record = SessionRecord(
            filename=audio.filename,
            transcript=transcript,
            summary=structuring.summary,
            speakers=structuring.speakers,
            turns=structuring.turns,
            embedding=tuple(embedding),
        )
        await self.store.prepend(record)
        SESSIONS_CREATED.inc()
        log.info(
            "session stored",
            extra={**log_extra, "session_id": record.id, "vectorized": record.vectorized},
        )
        return record.to_public()
