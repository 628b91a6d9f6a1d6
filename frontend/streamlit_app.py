# frontend/streamlit_app.py
from __future__ import annotations

from contextlib import suppress
from typing import Any

import streamlit as st

from frontend_api import (
    SessionApiError,
    create_session,
    format_datetime,
    list_sessions,
    merge_created_session,
)

AUDIO_TYPES = ["wav", "mp3", "m4a", "mp4", "mpeg", "mpga", "ogg", "webm", "flac"]


# ---------------------------
# State helpers
# ---------------------------
def _ensure_session_state() -> None:
    if "sessions" not in st.session_state:
        st.session_state.sessions = []
    if "active_id" not in st.session_state:
        st.session_state.active_id = None
    if "error" not in st.session_state:
        st.session_state.error = None
    if "loaded" not in st.session_state:
        st.session_state.loaded = False
    if "uploader_key" not in st.session_state:
        st.session_state.uploader_key = 0


def _active_session() -> dict[str, Any] | None:
    sessions = st.session_state.sessions
    for s in sessions:
        if s.get("id") == st.session_state.active_id:
            return s
    return sessions[0] if sessions else None


def _load_sessions() -> None:
    # The history is best-effort; a failed refresh keeps what we already have.
    with suppress(SessionApiError, OSError):
        sessions = list_sessions()
        st.session_state.sessions = sessions
        st.session_state.active_id = sessions[0]["id"] if sessions else None
    st.session_state.loaded = True


# ---------------------------
# Action callbacks
# ---------------------------
def _do_submit(upload: Any) -> None:
    if upload is None:
        st.session_state.error = "Please select an audio file."
        return
    st.session_state.error = None
    try:
        with st.spinner("Processing..."):
            saved = create_session(upload.name, upload.getvalue(), upload.type)
    except SessionApiError as e:
        st.session_state.error = str(e)
        return
    except Exception:
        st.session_state.error = "Failed to process session."
        return
    st.session_state.sessions = merge_created_session(st.session_state.sessions, saved)
    st.session_state.active_id = saved["id"]
    st.toast("Session processed")


def _do_clear() -> None:
    st.session_state.uploader_key += 1
    st.session_state.error = None


def _select(session_id: str) -> None:
    st.session_state.active_id = session_id


# ---------------------------
# Panels
# ---------------------------
def _render_upload() -> None:
    st.subheader("New session")
    upload = st.file_uploader(
        "Audio file",
        type=AUDIO_TYPES,
        key=f"audio_uploader_{st.session_state.uploader_key}",
    )
    if upload is not None:
        with st.container(border=True):
            st.caption("Ready to review audio")
            st.audio(upload.getvalue(), format=upload.type or "audio/wav")
            st.write(f"**{upload.name}**")
        st.button("Clear", on_click=_do_clear)

    st.button(
        "Transcribe & Summarize",
        type="primary",
        use_container_width=True,
        on_click=lambda: _do_submit(upload),
    )
    if st.session_state.error:
        st.error(st.session_state.error)


def _render_result(session: dict[str, Any] | None) -> None:
    st.subheader("Latest result")
    if session is None:
        with st.container(border=True):
            st.info("No sessions yet. Upload an audio file to see results here.")
        return

    with st.container(border=True):
        badges = ["✅ Transcribed", "✅ Summarized"]
        badges.append("🧭 Vectorized" if session.get("vectorized") else "⏳ Vector pending")
        st.write("  ·  ".join(badges))
        st.caption(f"{session.get('filename', '')} · {format_datetime(session.get('createdAt', ''))}")

        st.markdown("**Summary**")
        st.write(session.get("summary") or "—")

        st.markdown("**Speakers**")
        for sp in session.get("speakers") or []:
            label = f"{sp.get('name')} — {sp.get('role')}"
            st.write(f"- {label}" + (f" ({sp['note']})" if sp.get("note") else ""))

        st.markdown("**Transcript**")
        st.code(session.get("transcript") or "No transcript", language=None)

        st.markdown("**Dialogue**")
        turns = session.get("turns") or []
        if not turns:
            st.caption("No dialogue turns")
        for t in turns:
            st.write(f"**{t.get('speaker')}:** {t.get('text')}")


def _render_history() -> None:
    h1, h2 = st.columns([3, 1])
    h1.subheader("History")
    h2.button("Refresh", on_click=_load_sessions, use_container_width=True)

    sessions = st.session_state.sessions
    if not sessions:
        st.caption("Nothing processed yet.")
        return
    for s in sessions:
        label = f"{s.get('filename')} · {format_datetime(s.get('createdAt', ''), with_date=False)}"
        st.button(
            label,
            key=f"hist-{s['id']}",
            use_container_width=True,
            disabled=s["id"] == st.session_state.active_id,
            on_click=_select,
            args=(s["id"],),
        )


# ---------------------------
# App
# ---------------------------
def main() -> None:
    st.set_page_config(page_title="Session Transcriber", page_icon="🎧", layout="wide")
    _ensure_session_state()
    if not st.session_state.loaded:
        _load_sessions()

    st.title("🎧 Upload therapy sessions, get transcripts and summaries.")
    st.caption(
        "Drop an audio file, we call OpenAI to transcribe and summarize, "
        "and keep recent sessions handy for review."
    )

    left, right = st.columns([2, 3])
    with left:
        _render_upload()
        st.divider()
        _render_history()
    with right:
        _render_result(_active_session())


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    main()
