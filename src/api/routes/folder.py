"""
Folder endpoints.

Folders group recordings per user. Filing is idempotent and deleting a
folder leaves its recordings untouched.
"""

from fastapi import APIRouter, Depends

from src.api.deps import get_user_context
from src.core.models import FolderCreate, FolderResponse, RecordingResponse, UserContext
from src.services.storage.database import get_session
from src.services.storage.repository import RecordingRepository

router = APIRouter(prefix="/folders", tags=["folders"])


def _to_response(folder) -> FolderResponse:
    return FolderResponse(
        id=folder.id,
        name=folder.name,
        created_at=folder.created_at,
        recording_ids=[entry.recording_id for entry in folder.entries],
    )


@router.post("", response_model=FolderResponse, status_code=201)
async def create_folder(body: FolderCreate, user: UserContext = Depends(get_user_context)):
    async with get_session() as session:
        folder = await RecordingRepository(session).create_folder(user.user_id, body.name)
        return _to_response(folder)


@router.get("", response_model=list[FolderResponse])
async def list_folders(user: UserContext = Depends(get_user_context)):
    async with get_session() as session:
        folders = await RecordingRepository(session).list_folders(user.user_id)
        return [_to_response(f) for f in folders]


@router.delete("/{folder_id}", status_code=204)
async def delete_folder(folder_id: str, user: UserContext = Depends(get_user_context)):
    async with get_session() as session:
        await RecordingRepository(session).delete_folder(user.user_id, folder_id)


@router.get("/{folder_id}/recordings", response_model=list[RecordingResponse])
async def list_folder_recordings(folder_id: str, user: UserContext = Depends(get_user_context)):
    async with get_session() as session:
        repo = RecordingRepository(session)
        recordings = await repo.list_folder_recordings(user.user_id, folder_id)
        return [RecordingResponse.model_validate(r) for r in recordings]


@router.put("/{folder_id}/recordings/{recording_id}", response_model=FolderResponse)
async def add_to_folder(
    folder_id: str,
    recording_id: str,
    user: UserContext = Depends(get_user_context),
):
    async with get_session() as session:
        repo = RecordingRepository(session)
        folder = await repo.add_to_folder(user.user_id, folder_id, recording_id)
        return _to_response(folder)


@router.delete("/{folder_id}/recordings/{recording_id}", response_model=FolderResponse)
async def remove_from_folder(
    folder_id: str,
    recording_id: str,
    user: UserContext = Depends(get_user_context),
):
    async with get_session() as session:
        repo = RecordingRepository(session)
        folder = await repo.remove_from_folder(user.user_id, folder_id, recording_id)
        return _to_response(folder)
