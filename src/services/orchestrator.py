"""Save-and-process pipeline for a finished recording.

Runs the sequential upload -> transcribe -> analyze -> measure -> persist
flow for one recording and notifies subscribers when it is saved. Steps
are awaited one after another because each needs the previous result.

Usage::

    orchestrator = PipelineOrchestrator(storage, FunctionsClient(), events)
    recording = await orchestrator.save_and_process(audio, "Standup", user)

Failure policy: upload, transcription, analysis and the recording insert
are terminal and raise; the duration probe is best-effort. Nothing is
retried.
"""

import base64
import logging
import time
from collections.abc import Callable

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    AnalysisFailedError,
    PersistFailedError,
    TranscriptionFailedError,
)
from src.core.models import (
    AnalysisResult,
    HighlightCreate,
    RecordingCreate,
    RecordingResponse,
    UserContext,
)
from src.core.utils import format_duration
from src.services.analysis import analysis_from_dict
from src.services.audio.duration import probe_duration_async
from src.services.events import RecordingEvents, RecordingSaved
from src.services.functions_client import FunctionsClient
from src.services.storage.database import get_session
from src.services.storage.object_store import BaseObjectStorage
from src.services.storage.repository import RecordingRepository
from src.services.transcription import check_payload_size

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Recording"
AUDIO_CONTENT_TYPE = "audio/webm"
# Largest offset the INTEGER timestamp column accepts
MAX_TIMESTAMP_SECONDS = 2**31 - 1


def object_key(user_id: str, epoch_millis: int) -> str:
    """``{user_id}/{epoch_millis}.webm``"""
    return f"{user_id}/{epoch_millis}.webm"


def _whole_seconds(timestamp: float | None) -> int | None:
    if timestamp is None or not 0 <= timestamp <= MAX_TIMESTAMP_SECONDS:
        return None
    return int(timestamp)


def highlight_rows(analysis: AnalysisResult) -> list[HighlightCreate]:
    """Convert analysis highlights to rows with whole-second timestamps.

    Negative or out-of-range offsets are dropped to ``None``.
    """
    return [
        HighlightCreate(
            timestamp_seconds=_whole_seconds(h.timestamp),
            content=h.content,
        )
        for h in analysis.highlights
    ]


class PipelineOrchestrator:
    """Owns the save-and-process flow.

    Args:
        storage: Bucket the audio is uploaded to.
        functions: Client for the transcription and analysis functions.
        events: Registry notified after each successful save.
        settings: Defaults to the cached application settings.
        clock: Wall-clock seconds, used for the object key suffix.
    """

    def __init__(
        self,
        storage: BaseObjectStorage,
        functions: FunctionsClient,
        events: RecordingEvents | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._functions = functions
        self._events = events or RecordingEvents()
        self._settings = settings or get_settings()
        self._clock = clock

    @property
    def events(self) -> RecordingEvents:
        return self._events

    async def save_and_process(
        self,
        audio: bytes,
        title: str | None,
        user: UserContext,
    ) -> RecordingResponse:
        """Upload, transcribe, analyze and persist one recording.

        Raises:
            UploadError / StorageForbiddenError: The audio could not be stored.
            PayloadTooLargeError: Encoded audio exceeds the transcription ceiling.
            TranscriptionFailedError: No transcript was produced.
            AnalysisFailedError: The analysis carried no summary.
            PersistFailedError: The recording row could not be written.
        """
        title = (title or "").strip() or DEFAULT_TITLE
        key = object_key(user.user_id, int(self._clock() * 1000))

        # 1. upload
        audio_url = await self._storage.upload(key, audio, user.user_id, AUDIO_CONTENT_TYPE)
        logger.info("Uploaded %s for user %s", key, user.user_id)

        # 2-3. transcribe
        audio_b64 = base64.b64encode(audio).decode("ascii")
        check_payload_size(audio_b64, self._settings.max_audio_base64_chars)
        transcript = await self._transcribe(audio_b64)

        # 4. analyze
        analysis = await self._analyze(transcript)

        # 5. duration (best-effort)
        duration_seconds = await probe_duration_async(audio)
        duration_formatted = (
            format_duration(duration_seconds) if duration_seconds is not None else None
        )

        # 6. persist
        data = RecordingCreate(
            user_id=user.user_id,
            title=title,
            audio_url=audio_url,
            transcription=transcript,
            summary=analysis.summary,
            sentiment=analysis.sentiment,
            tags=analysis.tags,
            duration_seconds=duration_seconds,
            duration_formatted=duration_formatted,
        )
        recording = await self._persist(data, highlight_rows(analysis))

        # 7. notify
        await self._events.publish(
            RecordingSaved(user_id=user.user_id, recording_id=recording.id, title=title)
        )
        logger.info("Recording %s saved for user %s", recording.id, user.user_id)
        return recording

    async def _transcribe(self, audio_b64: str) -> str:
        try:
            body = await self._functions.transcribe(audio_b64)
        except (ConnectionError, TimeoutError, ValueError) as exc:
            logger.error("Transcription call failed: %s", exc)
            raise TranscriptionFailedError(f"Transcription failed: {exc}") from exc

        text = body.get("text")
        if not isinstance(text, str) or not text.strip():
            reason = body.get("error") or "No transcription returned"
            logger.error("Transcription failed: %s", reason)
            raise TranscriptionFailedError(f"Transcription failed: {reason}")
        return text

    async def _analyze(self, transcript: str) -> AnalysisResult:
        try:
            body = await self._functions.analyze(transcript)
        except (ConnectionError, TimeoutError, ValueError) as exc:
            logger.error("Analysis call failed: %s", exc)
            raise AnalysisFailedError(f"Analysis failed: {exc}") from exc

        if body.get("error"):
            logger.warning("Analysis reported an error: %s", body["error"])
        analysis = analysis_from_dict(body)
        if analysis is None:
            raise AnalysisFailedError(f"Analysis failed: {body.get('error') or 'no summary'}")
        return analysis

    async def _persist(
        self,
        data: RecordingCreate,
        highlights: list[HighlightCreate],
    ) -> RecordingResponse:
        try:
            async with get_session() as session:
                repo = RecordingRepository(session)
                await repo.ensure_profile(data.user_id)
                row = await repo.create_recording(data)
                response = RecordingResponse.model_validate(row)
        except (SQLAlchemyError, ValidationError, OverflowError) as exc:
            logger.exception("Failed to insert recording for %s", data.audio_url)
            raise PersistFailedError(f"Failed to save recording: {exc}") from exc

        if not highlights:
            return response

        try:
            async with get_session() as session:
                repo = RecordingRepository(session)
                row = await repo.get_recording_by_audio_url(data.user_id, data.audio_url)
                await repo.add_highlights(row.id, highlights)
                await session.refresh(row, attribute_names=["highlights"])
                response = RecordingResponse.model_validate(row)
        except (SQLAlchemyError, ValidationError, OverflowError) as exc:
            logger.exception("Failed to insert highlights for recording %s", response.id)
            raise PersistFailedError(f"Failed to save highlights: {exc}") from exc
        return response
