"""
Record page - capture audio in the browser and run the save pipeline.

``st.audio_input`` records with the browser's microphone; once a clip
exists it can be titled and saved, which uploads, transcribes, analyzes
and stores it in one call.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys
from pathlib import Path as _Path

_r = str(_Path(__file__).resolve().parents[3])
_r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.api_client import APIError, get_api_client  # noqa: E402
from src.ui.components.recording_card import render_highlights  # noqa: E402

client = get_api_client(st.session_state.api_base_url, st.session_state.user_id)

st.header("Record")

clip = st.audio_input("Record a voice note")
title = st.text_input("Title", placeholder="Untitled Recording")

if clip is not None and st.button("Save & process", type="primary"):
    with st.spinner("Uploading, transcribing and analyzing..."):
        try:
            saved = client.upload_recording(clip.getvalue(), title=title or None)
            st.session_state.last_saved = saved
            st.toast("Recording saved")
        except APIError as exc:
            st.error(exc.message)

saved = st.session_state.get("last_saved")
if saved:
    st.divider()
    st.subheader(saved.get("title") or "Untitled Recording")
    st.caption(f"Duration: {saved.get('duration_formatted') or 'unknown'}")
    if saved.get("summary"):
        st.write(saved["summary"])
    if saved.get("tags"):
        st.caption(" ".join(f"`{t}`" for t in saved["tags"]))
    if saved.get("highlights"):
        st.markdown("**Highlights**")
        render_highlights(saved["highlights"])
    with st.expander("Transcript"):
        st.write(saved.get("transcription") or "")
