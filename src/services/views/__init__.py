"""
Views module - search, tag graph and library statistics derived from recordings.
"""

from .graph import build_tag_graph, tag_adjacency
from .search import search_recordings
from .stats import compute_stats

__all__ = ["build_tag_graph", "compute_stats", "search_recordings", "tag_adjacency"]
