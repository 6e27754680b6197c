"""
Search page - case-insensitive match on title, transcript, summary and tags.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys
from pathlib import Path as _Path

_r = str(_Path(__file__).resolve().parents[3])
_r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.api_client import APIError, get_api_client  # noqa: E402

client = get_api_client(st.session_state.api_base_url, st.session_state.user_id)

st.header("Search")

query = st.text_input(
    "Search your recordings",
    value=st.session_state.search_query,
    placeholder="e.g. roadmap",
)
st.session_state.search_query = query

if query.strip():
    try:
        results = client.search(query)
    except APIError as exc:
        st.error(exc.message)
        st.stop()

    st.caption(f"{len(results)} result(s)")
    for result in results:
        with st.container(border=True):
            st.markdown(f"**{result['title']}**  ·  {result['timestamp']}")
            st.write(result["snippet"])
            if result.get("tags"):
                st.caption(" ".join(f"`{t}`" for t in result["tags"]))
            if result.get("audio_url"):
                st.audio(result["audio_url"], format="audio/webm")
