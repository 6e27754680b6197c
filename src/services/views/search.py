"""Case-insensitive substring search over a user's recordings.

A linear scan of the already-loaded recordings; there is no index.
"""

from collections.abc import Iterable

from src.core.models import RecordingResponse, SearchResult

SNIPPET_LENGTH = 150
NO_CONTENT = "No content available"
UNTITLED = "Untitled Recording"


def _matches(recording: RecordingResponse, needle: str) -> bool:
    fields = (recording.title, recording.transcription, recording.summary)
    if any(field and needle in field.lower() for field in fields):
        return True
    return any(needle in tag.lower() for tag in recording.tags)


def make_snippet(recording: RecordingResponse) -> str:
    """Summary if present, else the start of the transcript."""
    if recording.summary:
        return recording.summary
    if recording.transcription:
        return recording.transcription[:SNIPPET_LENGTH] + "..."
    return NO_CONTENT


def to_search_result(recording: RecordingResponse) -> SearchResult:
    return SearchResult(
        id=recording.id,
        title=recording.title or UNTITLED,
        snippet=make_snippet(recording),
        timestamp=recording.created_at.strftime("%Y-%m-%d"),
        tags=list(recording.tags),
        audio_url=recording.audio_url,
        transcription=recording.transcription,
    )


def search_recordings(
    recordings: Iterable[RecordingResponse],
    query: str | None,
) -> list[SearchResult]:
    """Return recordings whose title, transcript, summary or a tag contains *query*.

    A blank query matches nothing. Input order is preserved.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [to_search_result(r) for r in recordings if _matches(r, needle)]
