from __future__ import annotations

import asyncio

from app.models.session import SessionRecord
from app.schemas.sessions import SessionRead


class SessionStore:
    """
    Process-local, newest-first list of session records.

    One instance is created per app and handed to the ingestion pipeline.
    Contents are lost on restart.
    """

    def __init__(self) -> None:
        self._records: list[SessionRecord] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def prepend(self, record: SessionRecord) -> None:
        async with self._lock:
            self._records.insert(0, record)

    def records(self) -> list[SessionRecord]:
        """Snapshot of the internal records, embeddings included."""
        return list(self._records)

    def list(self) -> list[SessionRead]:
        return [r.to_public() for r in self._records]
