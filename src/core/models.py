"""
Pydantic v2 request / response models used across the API layer.

One plain model per entity with explicit required/optional fields;
repository and route code validate through these at the storage boundary.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health / session
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


class UserContext(BaseModel):
    """The authenticated caller, passed explicitly to every user-scoped service."""

    user_id: str = Field(min_length=1)


class ProfileResponse(BaseModel):
    """GET /profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


class Sentiment(StrEnum):
    """Overall tone of a recording as judged by the analysis service."""

    positive = "positive"
    neutral = "neutral"
    negative = "negative"


class HighlightCreate(BaseModel):
    """A highlight row to insert for a freshly saved recording."""

    timestamp_seconds: int | None = None
    content: str


class HighlightResponse(BaseModel):
    """A stored highlight."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    recording_id: str
    timestamp_seconds: int | None = None
    content: str | None = None


class RecordingCreate(BaseModel):
    """Everything the pipeline gathers before the single recording insert."""

    user_id: str
    title: str | None = None
    audio_url: str
    transcription: str
    summary: str | None = None
    sentiment: Sentiment = Sentiment.neutral
    tags: list[str] = Field(default_factory=list)
    duration_seconds: int | None = None
    duration_formatted: str | None = None


class RecordingUpdate(BaseModel):
    """PATCH /recordings/{id} request body (rename)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)


class RecordingResponse(BaseModel):
    """Standard recording representation returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str | None = None
    audio_url: str | None = None
    transcription: str | None = None
    summary: str | None = None
    sentiment: Sentiment | None = None
    tags: list[str] = Field(default_factory=list)
    duration_seconds: int | None = None
    duration_formatted: str | None = None
    created_at: datetime
    highlights: list[HighlightResponse] = Field(default_factory=list)


class DeleteRecordingResponse(BaseModel):
    """Response from deleting a recording and its stored audio."""

    id: str
    deleted: bool = True
    audio_removed: bool = False


class ShareResponse(BaseModel):
    """Payload for a native share sheet (or clipboard fallback on ``url``)."""

    title: str
    text: str
    url: str


# ---------------------------------------------------------------------------
# Serverless functions
# ---------------------------------------------------------------------------


class TranscribeRequest(BaseModel):
    """POST /functions/v1/transcribe-audio request body."""

    audio: str | None = None


class TranscriptionResult(BaseModel):
    """POST /functions/v1/transcribe-audio success body."""

    text: str
    language: str = "auto-detected"


class AnalyzeRequest(BaseModel):
    """POST /functions/v1/analyze-recording request body."""

    text: str | None = None


class AnalysisHighlight(BaseModel):
    """A quote picked out by the analysis service, with an estimated offset."""

    content: str
    timestamp: float | None = None


class AnalysisResult(BaseModel):
    """Structured analysis of a transcript.

    Serialised with camelCase keys (``keyPoints``, ``actionItems``) to keep
    the function's wire format.
    """

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    key_points: list[str] = Field(default_factory=list, alias="keyPoints")
    sentiment: Sentiment = Sentiment.neutral
    tags: list[str] = Field(default_factory=list)
    highlights: list[AnalysisHighlight] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list, alias="actionItems")


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class SearchResult(BaseModel):
    """A lightweight search hit."""

    id: str
    title: str
    snippet: str
    timestamp: str
    tags: list[str] = Field(default_factory=list)
    audio_url: str | None = None
    transcription: str | None = None


class GraphNode(BaseModel):
    """A tag node in the co-occurrence graph."""

    id: str
    label: str
    count: int
    sentiment: Sentiment
    size: int
    x: float
    y: float


class GraphEdge(BaseModel):
    """An undirected edge between two tags that share a recording."""

    id: str
    source: str
    target: str
    weight: int


class TagGraph(BaseModel):
    """GET /graph response."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


class GraphSnapshotResponse(BaseModel):
    """POST /graph/snapshot response."""

    tags_written: int = 0


class LibraryStats(BaseModel):
    """Dashboard counters derived from the caller's recordings."""

    total_recordings: int = 0
    unique_topics: int = 0
    connections: int = 0
    total_duration: str = "0m"


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


class FolderCreate(BaseModel):
    """POST /folders request body."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)


class FolderResponse(BaseModel):
    """A user folder with the ids of the recordings filed in it."""

    id: str
    name: str
    created_at: datetime
    recording_ids: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# WebSocket
# ---------------------------------------------------------------------------


class WebSocketMessageType(StrEnum):
    """Discriminator for messages sent over the recorder and event sockets."""

    connected = "connected"
    state = "state"
    tick = "tick"
    saved = "saved"
    recording_saved = "recording_saved"
    release = "release"
    error = "error"


class WebSocketMessage(BaseModel):
    """JSON message sent from server to client over WebSocket."""

    type: WebSocketMessageType
    data: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: str
