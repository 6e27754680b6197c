"""Library statistics shown above the tag graph."""

import math
from collections.abc import Iterable

from src.core.models import LibraryStats, RecordingResponse

WORDS_PER_MINUTE = 150
DEFAULT_MINUTES = 5


def estimated_seconds(recording: RecordingResponse) -> int:
    """Stored duration, else a reading-speed estimate from the transcript."""
    if recording.duration_seconds is not None:
        return recording.duration_seconds
    if recording.transcription:
        words = len(recording.transcription.split(" "))
        return math.ceil(words / WORDS_PER_MINUTE) * 60
    return DEFAULT_MINUTES * 60


def format_total_duration(seconds: int) -> str:
    """``"{h}h {m}m"`` from one hour up, else ``"{m}m"``."""
    hours, minutes = divmod(seconds // 60, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def compute_stats(recordings: Iterable[RecordingResponse]) -> LibraryStats:
    recordings = list(recordings)
    topics: set[str] = set()
    connections = 0
    total_seconds = 0

    for recording in recordings:
        tags = recording.tags
        topics.update(tags)
        if len(tags) > 1:
            connections += len(tags) * (len(tags) - 1) // 2
        total_seconds += estimated_seconds(recording)

    return LibraryStats(
        total_recordings=len(recordings),
        unique_topics=len(topics),
        connections=connections,
        total_duration=format_total_duration(total_seconds),
    )
