from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError

from app.logging_utils import get_logger
from app.schemas.sessions import Speaker, Turn

log = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a therapist assistant. Given a transcript, respond as JSON with keys: "
    "summary (<=120 words), speakers (array of at least two items, each with name and "
    "role, optional note), and turns (array of dialogue turns with speaker and text, "
    "at least 4 turns if possible). Avoid PHI and keep speaker names generic like "
    "Therapist, Client, Partner."
)

NO_TRANSCRIPT = "No transcript content available."
NO_SUMMARY = "No summary available."
CLIENT_SNIPPET_CHARS = 220

DEFAULT_SPEAKERS: tuple[Speaker, ...] = (
    Speaker(name="Speaker 1", role="Therapist"),
    Speaker(name="Speaker 2", role="Client"),
)


@dataclass(frozen=True)
class ParsedStructuring:
    """Every field came from the model response."""

    summary: str
    speakers: tuple[Speaker, ...]
    turns: tuple[Turn, ...]


@dataclass(frozen=True)
class FallbackStructuring:
    """At least one field was replaced by a default; ``substituted`` names them."""

    summary: str
    speakers: tuple[Speaker, ...]
    turns: tuple[Turn, ...]
    substituted: tuple[str, ...]


Structuring = Union[ParsedStructuring, FallbackStructuring]


def fallback_turns(summary: str, transcript: str) -> tuple[Turn, ...]:
    return (
        Turn(speaker="Therapist", text=summary or NO_TRANSCRIPT),
        Turn(speaker="Client", text=transcript[:CLIENT_SNIPPET_CHARS] or NO_TRANSCRIPT),
    )


def fallback_structuring(transcript: str) -> FallbackStructuring:
    return FallbackStructuring(
        summary=NO_SUMMARY,
        speakers=DEFAULT_SPEAKERS,
        turns=fallback_turns(NO_SUMMARY, transcript),
        substituted=("summary", "speakers", "turns"),
    )


def _load_object(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _valid_items(items: Any, model: type) -> list[Any]:
    if not isinstance(items, list):
        return []
    out = []
    for item in items:
        try:
            out.append(model.model_validate(item))
        except ValidationError:
            continue
    return out


def parse_structuring(raw: str | None, transcript: str) -> Structuring:
    """
    Turn the model's raw response into summary / speakers / turns.

    Pure function; never raises. Fields are substituted one at a time:
    a blank summary, fewer than two valid speakers, or no valid turn each
    fall back to their defaults while the remaining fields are kept.
    """
    data = _load_object(raw)
    if data is None:
        log.warning("structuring response was not a JSON object")
        return fallback_structuring(transcript)

    substituted: list[str] = []

    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = NO_SUMMARY
        substituted.append("summary")

    speakers = tuple(_valid_items(data.get("speakers"), Speaker))
    if len(speakers) < 2:
        speakers = DEFAULT_SPEAKERS
        substituted.append("speakers")

    turns = tuple(_valid_items(data.get("turns"), Turn))
    if not turns:
        turns = fallback_turns(summary, transcript)
        substituted.append("turns")

    if substituted:
        log.info("structuring fields substituted", extra={"substituted": substituted})
        return FallbackStructuring(summary, speakers, turns, tuple(substituted))
    return ParsedStructuring(summary, speakers, turns)


async def request_structuring(
    client: Any,
    transcript: str,
    *,
    model: str,
    temperature: float = 0.2,
) -> str | None:
    """Ask the chat model for the JSON breakdown and return its raw content."""
    completion = await client.chat.completions.create(
        model=model,
        temperature=temperature,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": transcript or NO_TRANSCRIPT},
        ],
    )
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    return choices[0].message.content
