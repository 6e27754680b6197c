"""
Library page - every recording, newest first, with folder filing.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys
from pathlib import Path as _Path

_r = str(_Path(__file__).resolve().parents[3])
_r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.api_client import APIError, get_api_client  # noqa: E402
from src.ui.components.recording_card import render_recording_card  # noqa: E402

client = get_api_client(st.session_state.api_base_url, st.session_state.user_id)

col_title, col_refresh = st.columns([6, 1])
with col_title:
    st.header("Library")
with col_refresh:
    st.markdown("")  # vertical spacer
    if st.button("Refresh", key="library_refresh"):
        st.rerun()

# -- Sidebar: folders --
with st.sidebar:
    st.subheader("Folders")
    try:
        folders = client.list_folders()
    except APIError as exc:
        folders = []
        st.error(exc.message)
    new_folder = st.text_input("New folder", key="new_folder")
    if st.button("Create folder") and new_folder.strip():
        try:
            client.create_folder(new_folder)
            st.rerun()
        except APIError as exc:
            st.error(exc.message)

folder_names = {"All recordings": None} | {f["name"]: f for f in folders}
selected = st.selectbox("Show", list(folder_names))
folder = folder_names[selected]

try:
    recordings = client.list_recordings()
except APIError as exc:
    st.error(exc.message)
    st.stop()

if folder is not None:
    filed = set(folder["recording_ids"])
    recordings = [r for r in recordings if r["id"] in filed]

if not recordings:
    st.info("No recordings yet. Record something on the Record page.")

for recording in recordings:
    render_recording_card(recording, client)
    if folders:
        with st.popover("Folders", use_container_width=False):
            for f in folders:
                inside = recording["id"] in f["recording_ids"]
                checked = st.checkbox(f["name"], value=inside, key=f"f_{f['id']}_{recording['id']}")
                if checked != inside:
                    try:
                        if checked:
                            client.add_to_folder(f["id"], recording["id"])
                        else:
                            client.remove_from_folder(f["id"], recording["id"])
                        st.rerun()
                    except APIError as exc:
                        st.error(exc.message)
