"""
Recording card display components.
"""

import streamlit as st

from src.ui.api_client import APIClient, APIError
from src.ui.utils import format_date, format_timestamp, sentiment_badge


def render_highlights(highlights: list[dict]) -> None:
    for h in highlights:
        st.markdown(f"- `{format_timestamp(h.get('timestamp_seconds'))}` {h.get('content', '')}")


def render_recording_card(recording: dict, client: APIClient) -> None:
    """Render one recording with expandable details and library actions.

    Args:
        recording: Recording dict from the API.
        client: Used for rename / delete / download / share.
    """
    rec_id = recording["id"]
    title = recording.get("title") or "Untitled Recording"

    with st.container(border=True):
        col1, col2, col3 = st.columns([5, 1, 1])
        with col1:
            st.markdown(f"**{title}**")
            st.caption(
                f"{format_date(recording.get('created_at'))} · "
                f"{recording.get('duration_formatted') or '00:00'} · "
                f"{sentiment_badge(recording.get('sentiment'))}"
            )
        with col2:
            audio = client.download_recording(rec_id) if st.session_state.get(
                f"dl_{rec_id}"
            ) else None
            if audio is None:
                if st.button("Download", key=f"prep_{rec_id}"):
                    st.session_state[f"dl_{rec_id}"] = True
                    st.rerun()
            else:
                st.download_button(
                    "Save file",
                    data=audio,
                    file_name=f"{recording.get('title') or 'recording'}.webm",
                    mime="audio/webm",
                    key=f"save_{rec_id}",
                )
        with col3:
            if st.button("Delete", key=f"del_{rec_id}", type="secondary"):
                try:
                    client.delete_recording(rec_id)
                    st.toast(f"Deleted '{title}'")
                    st.rerun()
                except APIError as exc:
                    st.error(exc.message)

        if recording.get("summary"):
            st.write(recording["summary"])
        tags = recording.get("tags") or []
        if tags:
            st.caption(" ".join(f"`{t}`" for t in tags))

        with st.expander("Details"):
            if recording.get("audio_url"):
                st.audio(recording["audio_url"], format="audio/webm")
            st.markdown("**Transcript**")
            st.write(recording.get("transcription") or "_No transcript_")
            if recording.get("highlights"):
                st.markdown("**Highlights**")
                render_highlights(recording["highlights"])

            new_title = st.text_input("Title", value=title, key=f"title_{rec_id}")
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Rename", key=f"rename_{rec_id}") and new_title.strip() != title:
                    try:
                        client.rename_recording(rec_id, new_title)
                        st.rerun()
                    except APIError as exc:
                        st.error(exc.message)
            with c2:
                if st.button("Share", key=f"share_{rec_id}"):
                    try:
                        payload = client.share_recording(rec_id)
                        st.code(f"{payload['text']}\n{payload['url']}", language=None)
                        st.caption("Copy the link above to share this recording.")
                    except APIError as exc:
                        st.error(exc.message)
