"""
Recording REST endpoints.

Create (save-and-process an uploaded recording), list, read, rename,
delete, download and share. Reads and writes go straight to
``RecordingRepository``; creation is delegated to the pipeline
orchestrator.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from src.api.deps import get_orchestrator, get_storage, get_user_context
from src.core.exceptions import RecordingNotFoundError
from src.core.models import (
    DeleteRecordingResponse,
    RecordingResponse,
    RecordingUpdate,
    ShareResponse,
    UserContext,
)
from src.services.orchestrator import AUDIO_CONTENT_TYPE, PipelineOrchestrator
from src.services.storage.database import get_session
from src.services.storage.object_store import BaseObjectStorage
from src.services.storage.repository import RecordingRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recordings", tags=["recordings"])

SHARE_FALLBACK_TEXT = "Check out this recording"


def _to_response(recording) -> RecordingResponse:
    """Convert an ORM Recording to its API model."""
    return RecordingResponse.model_validate(recording)


def download_filename(title: str | None) -> str:
    return f"{title or 'recording'}.webm"


@router.post("", response_model=RecordingResponse, status_code=201)
async def create_recording(
    file: UploadFile = File(...),
    title: str | None = Form(None),
    user: UserContext = Depends(get_user_context),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
):
    """Upload a finished recording and run the full pipeline on it."""
    audio = await file.read()
    return await orchestrator.save_and_process(audio, title, user)


@router.get("", response_model=list[RecordingResponse])
async def list_recordings(
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user: UserContext = Depends(get_user_context),
):
    """List the caller's recordings, newest first."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        recordings = await repo.list_recordings(user.user_id, limit=limit, offset=offset)
        return [_to_response(r) for r in recordings]


@router.get("/{recording_id}", response_model=RecordingResponse)
async def get_recording(recording_id: str, user: UserContext = Depends(get_user_context)):
    async with get_session() as session:
        repo = RecordingRepository(session)
        return _to_response(await repo.get_recording(user.user_id, recording_id))


@router.patch("/{recording_id}", response_model=RecordingResponse)
async def rename_recording(
    recording_id: str,
    body: RecordingUpdate,
    user: UserContext = Depends(get_user_context),
):
    """Set a new title (whitespace is trimmed; an empty title is rejected)."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        recording = await repo.rename_recording(user.user_id, recording_id, body.title)
        return _to_response(recording)


@router.delete("/{recording_id}", response_model=DeleteRecordingResponse)
async def delete_recording(
    recording_id: str,
    user: UserContext = Depends(get_user_context),
    storage: BaseObjectStorage = Depends(get_storage),
):
    """Delete the stored audio, then the row (highlights and folder entries cascade)."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        recording = await repo.get_recording(user.user_id, recording_id)

        audio_removed = False
        key = storage.key_from_url(recording.audio_url) if recording.audio_url else None
        if key:
            audio_removed = await storage.remove(key, user.user_id)
        else:
            logger.warning("Recording %s has no stored audio to remove", recording_id)

        await repo.delete_recording(user.user_id, recording_id)

    logger.info("Deleted recording %s (audio removed: %s)", recording_id, audio_removed)
    return DeleteRecordingResponse(id=recording_id, audio_removed=audio_removed)


@router.get("/{recording_id}/download")
async def download_recording(
    recording_id: str,
    user: UserContext = Depends(get_user_context),
    storage: BaseObjectStorage = Depends(get_storage),
):
    """Stream the audio back as an attachment named after the title."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        recording = await repo.get_recording(user.user_id, recording_id)

    key = storage.key_from_url(recording.audio_url) if recording.audio_url else None
    if key is None:
        raise RecordingNotFoundError(recording_id)
    try:
        data = await storage.download(key)
    except FileNotFoundError as exc:
        raise RecordingNotFoundError(recording_id) from exc

    filename = download_filename(recording.title)
    return Response(
        content=data,
        media_type=AUDIO_CONTENT_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.get("/{recording_id}/share", response_model=ShareResponse)
async def share_recording(recording_id: str, user: UserContext = Depends(get_user_context)):
    """Share-sheet payload; clients without one copy ``url`` to the clipboard."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        recording = await repo.get_recording(user.user_id, recording_id)
    return ShareResponse(
        title=recording.title or "Recording",
        text=recording.summary or SHARE_FALLBACK_TEXT,
        url=recording.audio_url or "",
    )
