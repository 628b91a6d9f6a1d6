from __future__ import annotations

from app.models.session import SessionRecord

__all__ = ["SessionRecord"]
