from __future__ import annotations

from typing import Any

NO_CONTENT = "No content available"


def choose_embedding_input(summary: str, transcript: str) -> str:
    return summary or transcript or NO_CONTENT


async def embed_text(client: Any, text: str, *, model: str) -> list[float]:
    """Return the embedding vector for ``text``; empty when the provider sends none."""
    response = await client.embeddings.create(model=model, input=text)
    data = getattr(response, "data", None) or []
    if not data:
        return []
    return [float(x) for x in (data[0].embedding or [])]
