"""
Knowledge graph page - tag co-occurrence graph and library statistics.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys
from pathlib import Path as _Path

_r = str(_Path(__file__).resolve().parents[3])
_r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.api_client import APIError, get_api_client  # noqa: E402

client = get_api_client(st.session_state.api_base_url, st.session_state.user_id)

_COLORS = {"positive": "#16a34a", "negative": "#dc2626", "neutral": "#64748b"}

st.header("Knowledge Graph")

try:
    stats = client.get_stats()
    graph = client.get_graph()
except APIError as exc:
    st.error(exc.message)
    st.stop()

c1, c2, c3, c4 = st.columns(4)
c1.metric("Recordings", stats["total_recordings"])
c2.metric("Unique Topics", stats["unique_topics"])
c3.metric("Connections", stats["connections"])
c4.metric("Total Duration", stats["total_duration"])

if not graph["nodes"]:
    st.info("No recordings with tags found. Record some audio to see your knowledge graph.")
    st.stop()

# Nodes and edges as a Vega-Lite layered chart on the precomputed positions
positions = {n["id"]: (n["x"], n["y"]) for n in graph["nodes"]}
edge_rows = []
for edge in graph["edges"]:
    for end in (edge["source"], edge["target"]):
        x, y = positions[end]
        edge_rows.append({"edge": edge["id"], "x": x, "y": y, "weight": edge["weight"]})
node_rows = [
    {**n, "color": _COLORS.get(n["sentiment"], _COLORS["neutral"])} for n in graph["nodes"]
]

st.vega_lite_chart(
    {
        "height": 500,
        "layer": [
            {
                "data": {"values": edge_rows},
                "mark": {"type": "line", "opacity": 0.5},
                "encoding": {
                    "x": {"field": "x", "type": "quantitative", "axis": None},
                    "y": {"field": "y", "type": "quantitative", "axis": None},
                    "detail": {"field": "edge"},
                    "strokeWidth": {"field": "weight", "type": "quantitative", "legend": None},
                },
            },
            {
                "data": {"values": node_rows},
                "mark": {"type": "circle", "opacity": 0.9},
                "encoding": {
                    "x": {"field": "x", "type": "quantitative"},
                    "y": {"field": "y", "type": "quantitative"},
                    "size": {"field": "size", "type": "quantitative", "legend": None},
                    "color": {"field": "color", "type": "nominal", "scale": None},
                    "tooltip": [{"field": "label"}, {"field": "sentiment"}],
                },
            },
            {
                "data": {"values": node_rows},
                "mark": {"type": "text", "dy": -14},
                "encoding": {
                    "x": {"field": "x", "type": "quantitative"},
                    "y": {"field": "y", "type": "quantitative"},
                    "text": {"field": "label"},
                },
            },
        ],
    },
    use_container_width=True,
)

if st.button("Save snapshot to knowledge graph"):
    try:
        result = client.snapshot_graph()
        st.success(f"Saved {result['tags_written']} tag(s)")
    except APIError as exc:
        st.error(exc.message)
