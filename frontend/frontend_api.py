# frontend/frontend_api.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any

import requests

API_BASE = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
TIMEOUT = 30
# Uploads wait on three provider calls in a row.
UPLOAD_TIMEOUT = 300

SessionEntry = dict[str, Any]


class SessionApiError(RuntimeError):
    """Raised with the server's ``error`` message when a call fails."""


def _full(path: str) -> str:
    """Return an absolute URL for the API, accepting either absolute or relative paths."""
    if path.startswith(("http://", "https://")):
        return path
    return f"{API_BASE.rstrip('/')}/{path.lstrip('/')}"


def _error_message(resp: requests.Response, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


def list_sessions(*, timeout: int = TIMEOUT) -> list[SessionEntry]:
    """GET /sessions, newest first."""
    r = requests.get(_full("/sessions"), timeout=timeout)
    if not r.ok:
        raise SessionApiError(_error_message(r, "Failed to load sessions"))
    return list(r.json().get("sessions", []))


def create_session(
    filename: str,
    data: bytes,
    content_type: str | None = None,
    *,
    timeout: int = UPLOAD_TIMEOUT,
) -> SessionEntry:
    """POST the audio file as multipart field ``file`` and return the saved record."""
    files = {"file": (filename, data, content_type or "application/octet-stream")}
    r = requests.post(_full("/sessions"), files=files, timeout=timeout)
    if not r.ok:
        raise SessionApiError(_error_message(r, "Upload failed"))
    return r.json()


def merge_created_session(
    sessions: list[SessionEntry], saved: SessionEntry
) -> list[SessionEntry]:
    """Client-side copy of the server's prepend."""
    return [saved, *sessions]


def format_datetime(value: str, *, with_date: bool = True) -> str:
    """Render an ISO timestamp in UTC; unparseable values are returned as-is."""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    time_part = dt.strftime("%I:%M %p").lstrip("0")
    if not with_date:
        return time_part
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}, {time_part}"
