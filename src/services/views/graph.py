"""Tag co-occurrence graph.

Nodes are the distinct tags across a user's recordings; an edge joins two
tags that appear together on at least one recording. The graph is derived
in full on every call and laid out on a circle.
"""

import math
from collections import Counter
from collections.abc import Iterable

from src.core.models import GraphEdge, GraphNode, RecordingResponse, Sentiment, TagGraph

CENTER_X = 300.0
CENTER_Y = 200.0
MIN_RADIUS = 150.0
RADIUS_PER_NODE = 25.0
MIN_NODE_SIZE = 60
MAX_NODE_SIZE = 120
SIZE_PER_COUNT = 20


def _unique_tags(recording: RecordingResponse) -> list[str]:
    # A tag repeated on one recording counts once
    return list(dict.fromkeys(tag for tag in recording.tags if tag))


def dominant_sentiment(sentiments: list[Sentiment]) -> Sentiment:
    """Majority vote; ties go to the sentiment seen first."""
    counts = Counter(sentiments)
    best = sentiments[0]
    for sentiment in counts:
        if counts[sentiment] > counts[best]:
            best = sentiment
    return best


def circular_positions(count: int) -> list[tuple[float, float]]:
    radius = max(MIN_RADIUS, count * RADIUS_PER_NODE)
    return [
        (
            CENTER_X + radius * math.cos(2 * math.pi * i / count),
            CENTER_Y + radius * math.sin(2 * math.pi * i / count),
        )
        for i in range(count)
    ]


def tag_adjacency(recordings: Iterable[RecordingResponse]) -> dict[str, set[str]]:
    """Map every tag to the set of tags it co-occurs with."""
    adjacency: dict[str, set[str]] = {}
    for recording in recordings:
        tags = _unique_tags(recording)
        for tag in tags:
            adjacency.setdefault(tag, set()).update(t for t in tags if t != tag)
    return adjacency


def build_tag_graph(recordings: Iterable[RecordingResponse]) -> TagGraph:
    """Derive nodes (count, dominant sentiment, size, position) and weighted edges."""
    recordings = list(recordings)
    counts: dict[str, int] = {}
    sentiments: dict[str, list[Sentiment]] = {}

    for recording in recordings:
        sentiment = recording.sentiment or Sentiment.neutral
        for tag in _unique_tags(recording):
            counts[tag] = counts.get(tag, 0) + 1
            sentiments.setdefault(tag, []).append(sentiment)

    positions = circular_positions(len(counts))
    nodes = []
    for (tag, count), (x, y) in zip(counts.items(), positions, strict=True):
        nodes.append(
            GraphNode(
                id=tag,
                label=f"{tag} ({count})",
                count=count,
                sentiment=dominant_sentiment(sentiments[tag]),
                size=max(MIN_NODE_SIZE, min(MAX_NODE_SIZE, count * SIZE_PER_COUNT)),
                x=x,
                y=y,
            )
        )

    edges = []
    for source, targets in tag_adjacency(recordings).items():
        for target in sorted(targets):
            if source < target:
                edges.append(
                    GraphEdge(
                        id=f"{source}-{target}",
                        source=source,
                        target=target,
                        weight=min(counts[source], counts[target]),
                    )
                )

    return TagGraph(nodes=nodes, edges=edges)
