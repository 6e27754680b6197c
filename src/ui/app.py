"""
EchoVault Streamlit UI - main entry point.

Run with: ``streamlit run src/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from src.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (src/ui/),
# which removes the project root needed for absolute ``src.*`` imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from src.core.config import get_settings  # noqa: E402
from src.ui.api_client import get_api_client  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="EchoVault",
    page_icon="\U0001f399️",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": get_settings().public_base_url,
    "user_id": "",
    "search_query": "",
    "last_saved": None,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399️ EchoVault")
    st.caption("Record, transcribe and explore your voice notes")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
    )
    st.session_state.user_id = st.text_input(
        "User ID",
        value=st.session_state.user_id,
        help="Sent as X-User-Id; normally set by the sign-in gateway.",
    )

    _client = get_api_client(st.session_state.api_base_url, st.session_state.user_id)
    _conn_ok, _conn_msg = _client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

# ---------------------------------------------------------------------------
# Navigation (multipage)
# ---------------------------------------------------------------------------
record_page = st.Page("pages/01_record.py", title="Record", icon="\U0001f3a4", default=True)
library_page = st.Page("pages/02_library.py", title="Library", icon="\U0001f4da")
search_page = st.Page("pages/03_search.py", title="Search", icon="\U0001f50d")
graph_page = st.Page("pages/04_graph.py", title="Knowledge Graph", icon="\U0001f578️")

if not st.session_state.user_id:
    st.info("Enter your user ID in the sidebar to get started.")
    st.stop()

st.navigation([record_page, library_page, search_page, graph_page]).run()
