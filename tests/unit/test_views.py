"""Tests for the search, tag-graph and statistics views."""

from datetime import UTC, datetime

import pytest

from src.core.models import RecordingResponse, Sentiment
from src.services.views import build_tag_graph, compute_stats, search_recordings, tag_adjacency
from src.services.views.graph import circular_positions, dominant_sentiment
from src.services.views.search import NO_CONTENT, make_snippet
from src.services.views.stats import estimated_seconds, format_total_duration


def _rec(
    rid: str = "r1",
    title: str | None = "Team Sync",
    transcription: str | None = "we discussed the roadmap",
    summary: str | None = None,
    tags: list[str] | None = None,
    sentiment: Sentiment | None = Sentiment.neutral,
    duration_seconds: int | None = None,
) -> RecordingResponse:
    return RecordingResponse(
        id=rid,
        user_id="user-1",
        title=title,
        transcription=transcription,
        summary=summary,
        tags=tags or [],
        sentiment=sentiment,
        duration_seconds=duration_seconds,
        created_at=datetime(2024, 3, 5, 14, 30, tzinfo=UTC),
    )


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


class TestSearch:
    @pytest.mark.parametrize("query", ["team", "Sync", "roadmap", "ROADMAP"])
    def test_matches_title_and_transcript(self, query):
        results = search_recordings([_rec()], query)
        assert [r.id for r in results] == ["r1"]

    def test_matches_summary_and_tags(self):
        recs = [
            _rec("a", title=None, transcription=None, summary="Budget review"),
            _rec("b", title=None, transcription=None, tags=["Finance"]),
        ]
        assert [r.id for r in search_recordings(recs, "budget")] == ["a"]
        assert [r.id for r in search_recordings(recs, "finance")] == ["b"]

    def test_no_match(self):
        assert search_recordings([_rec()], "holiday") == []

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_matches_nothing(self, query):
        assert search_recordings([_rec()], query) == []

    def test_result_shape(self):
        result = search_recordings([_rec(title=None, tags=["x"])], "roadmap")[0]
        assert result.title == "Untitled Recording"
        assert result.timestamp == "2024-03-05"
        assert result.snippet == "we discussed the roadmap..."
        assert result.tags == ["x"]

    def test_snippet_prefers_summary(self):
        assert make_snippet(_rec(summary="Short")) == "Short"

    def test_snippet_truncates_transcript(self):
        snippet = make_snippet(_rec(transcription="x" * 400))
        assert snippet == "x" * 150 + "..."

    def test_snippet_without_content(self):
        assert make_snippet(_rec(transcription=None)) == NO_CONTENT


# ---------------------------------------------------------------------------
# graph
# ---------------------------------------------------------------------------


class TestGraph:
    def test_counts_and_edges(self):
        graph = build_tag_graph([_rec("1", tags=["a", "b"]), _rec("2", tags=["b", "c"])])

        counts = {n.id: n.count for n in graph.nodes}
        assert counts == {"a": 1, "b": 2, "c": 1}
        assert {e.id for e in graph.edges} == {"a-b", "b-c"}
        assert all(e.weight == 1 for e in graph.edges)

    def test_node_label_and_size(self):
        recs = [_rec(str(i), tags=["topic"]) for i in range(7)]
        node = build_tag_graph(recs).nodes[0]
        assert node.label == "topic (7)"
        assert node.size == 120

        single = build_tag_graph([_rec(tags=["solo"])]).nodes[0]
        assert single.size == 60

    def test_edge_weight_is_min_count(self):
        recs = [_rec("1", tags=["a", "b"]), _rec("2", tags=["a"]), _rec("3", tags=["a"])]
        edge = build_tag_graph(recs).edges[0]
        assert (edge.source, edge.target, edge.weight) == ("a", "b", 1)

    def test_repeated_tag_counts_once_per_recording(self):
        graph = build_tag_graph([_rec(tags=["a", "a", "b"])])
        assert {n.id: n.count for n in graph.nodes} == {"a": 1, "b": 1}
        assert [e.id for e in graph.edges] == ["a-b"]

    def test_dominant_sentiment(self):
        recs = [
            _rec("1", tags=["t"], sentiment=Sentiment.negative),
            _rec("2", tags=["t"], sentiment=Sentiment.positive),
            _rec("3", tags=["t"], sentiment=Sentiment.positive),
        ]
        assert build_tag_graph(recs).nodes[0].sentiment == Sentiment.positive

    def test_sentiment_tie_goes_to_first_seen(self):
        assert dominant_sentiment([Sentiment.negative, Sentiment.positive]) == Sentiment.negative

    def test_missing_sentiment_counts_as_neutral(self):
        graph = build_tag_graph([_rec(tags=["t"], sentiment=None)])
        assert graph.nodes[0].sentiment == Sentiment.neutral

    def test_circular_layout(self):
        (x0, y0), (x1, y1) = circular_positions(2)
        assert (x0, y0) == pytest.approx((450.0, 200.0))
        assert (x1, y1) == pytest.approx((150.0, 200.0))
        # Radius grows past 150 once there are more than six nodes
        x, _ = circular_positions(8)[0]
        assert x == pytest.approx(500.0)

    def test_empty_library(self):
        graph = build_tag_graph([])
        assert graph.nodes == []
        assert graph.edges == []

    def test_adjacency(self):
        adjacency = tag_adjacency([_rec(tags=["a", "b"]), _rec(tags=["b", "c"])])
        assert adjacency == {"a": {"b"}, "b": {"a", "c"}, "c": {"b"}}


# ---------------------------------------------------------------------------
# stats
# ---------------------------------------------------------------------------


class TestStats:
    def test_counts(self):
        stats = compute_stats(
            [
                _rec("1", tags=["a", "b", "c"], duration_seconds=600),
                _rec("2", tags=["a"], duration_seconds=300),
            ]
        )
        assert stats.total_recordings == 2
        assert stats.unique_topics == 3
        assert stats.connections == 3
        assert stats.total_duration == "15m"

    def test_estimate_from_transcript(self):
        words = " ".join(["word"] * 151)
        assert estimated_seconds(_rec(transcription=words)) == 120

    def test_estimate_default(self):
        assert estimated_seconds(_rec(transcription=None)) == 300

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0m"), (59, "0m"), (3599, "59m"), (3600, "1h 0m"), (5460, "1h 31m")],
    )
    def test_format_total_duration(self, seconds, expected):
        assert format_total_duration(seconds) == expected

    def test_empty_library(self):
        stats = compute_stats([])
        assert stats.total_recordings == 0
        assert stats.total_duration == "0m"
