"""
CRUD repository for all EchoVault tables.

``RecordingRepository`` receives an ``AsyncSession`` and provides all
data-access methods.  It calls ``flush()`` rather than ``commit()`` so
that transaction boundaries are controlled by the caller (typically
:func:`get_session`).

Every recording / highlight / folder query is filtered on the owning
``user_id``: a row that belongs to someone else behaves exactly like a
row that does not exist.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import FolderNotFoundError, RecordingNotFoundError
from src.core.models import HighlightCreate, RecordingCreate
from src.services.storage.models_db import (
    Folder,
    FolderRecording,
    Highlight,
    KnowledgeGraphEntry,
    Profile,
    Recording,
)

logger = logging.getLogger(__name__)


class RecordingRepository:
    """Data-access layer for the EchoVault schema.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def ensure_profile(
        self,
        user_id: str,
        full_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile:
        """Return the user's profile, creating it on first sight."""
        profile = await self._session.get(Profile, user_id)
        if profile is None:
            profile = Profile(id=user_id, full_name=full_name, avatar_url=avatar_url)
            self._session.add(profile)
            await self._session.flush()
        return profile

    # ------------------------------------------------------------------
    # Recordings
    # ------------------------------------------------------------------

    async def create_recording(self, data: RecordingCreate) -> Recording:
        """Insert one fully populated recording row."""
        recording = Recording(
            user_id=data.user_id,
            title=data.title,
            audio_url=data.audio_url,
            transcription=data.transcription,
            summary=data.summary,
            sentiment=data.sentiment.value,
            tags=list(data.tags),
            duration_seconds=data.duration_seconds,
            duration_formatted=data.duration_formatted,
            highlights=[],
        )
        self._session.add(recording)
        await self._session.flush()
        return recording

    async def get_recording(self, user_id: str, recording_id: str) -> Recording:
        """Return a recording by ID or raise :class:`RecordingNotFoundError`."""
        stmt = select(Recording).where(
            Recording.id == recording_id,
            Recording.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        recording = result.scalar_one_or_none()
        if recording is None:
            raise RecordingNotFoundError(recording_id)
        return recording

    async def get_recording_by_audio_url(self, user_id: str, audio_url: str) -> Recording:
        """Unique lookup on ``audio_url``; raises if absent."""
        stmt = select(Recording).where(
            Recording.audio_url == audio_url,
            Recording.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        recording = result.scalar_one_or_none()
        if recording is None:
            raise RecordingNotFoundError(audio_url)
        return recording

    async def list_recordings(
        self,
        user_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Recording]:
        """Return the user's recordings, newest first."""
        stmt = (
            select(Recording)
            .where(Recording.user_id == user_id)
            .order_by(Recording.created_at.desc(), Recording.id)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_recordings(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(Recording).where(Recording.user_id == user_id)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def rename_recording(self, user_id: str, recording_id: str, title: str) -> Recording:
        """Set a new title."""
        recording = await self.get_recording(user_id, recording_id)
        recording.title = title
        await self._session.flush()
        return recording

    async def delete_recording(self, user_id: str, recording_id: str) -> Recording:
        """Delete a recording (highlights and folder entries cascade).

        Returns the deleted row so the caller can clean up its audio object.
        """
        recording = await self.get_recording(user_id, recording_id)
        await self._session.delete(recording)
        await self._session.flush()
        return recording

    # ------------------------------------------------------------------
    # Highlights
    # ------------------------------------------------------------------

    async def add_highlights(
        self,
        recording_id: str,
        highlights: list[HighlightCreate],
    ) -> list[Highlight]:
        """Insert highlight rows for an existing recording."""
        rows = [
            Highlight(
                recording_id=recording_id,
                timestamp_seconds=h.timestamp_seconds,
                content=h.content,
            )
            for h in highlights
        ]
        self._session.add_all(rows)
        await self._session.flush()
        return rows

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def create_folder(self, user_id: str, name: str) -> Folder:
        folder = Folder(user_id=user_id, name=name, entries=[])
        self._session.add(folder)
        await self._session.flush()
        return folder

    async def get_folder(self, user_id: str, folder_id: str) -> Folder:
        """Return a folder by ID or raise :class:`FolderNotFoundError`."""
        stmt = select(Folder).where(Folder.id == folder_id, Folder.user_id == user_id)
        result = await self._session.execute(stmt)
        folder = result.scalar_one_or_none()
        if folder is None:
            raise FolderNotFoundError(folder_id)
        return folder

    async def list_folders(self, user_id: str) -> list[Folder]:
        stmt = select(Folder).where(Folder.user_id == user_id).order_by(Folder.name)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def delete_folder(self, user_id: str, folder_id: str) -> None:
        """Delete a folder; the recordings in it are untouched."""
        folder = await self.get_folder(user_id, folder_id)
        await self._session.delete(folder)
        await self._session.flush()

    async def add_to_folder(self, user_id: str, folder_id: str, recording_id: str) -> Folder:
        """File a recording in a folder (idempotent)."""
        folder = await self.get_folder(user_id, folder_id)
        await self.get_recording(user_id, recording_id)
        if not any(entry.recording_id == recording_id for entry in folder.entries):
            folder.entries.append(FolderRecording(recording_id=recording_id))
            await self._session.flush()
        return folder

    async def remove_from_folder(self, user_id: str, folder_id: str, recording_id: str) -> Folder:
        """Take a recording out of a folder (no-op if it was not filed there)."""
        folder = await self.get_folder(user_id, folder_id)
        for entry in list(folder.entries):
            if entry.recording_id == recording_id:
                folder.entries.remove(entry)
        await self._session.flush()
        return folder

    async def list_folder_recordings(self, user_id: str, folder_id: str) -> list[Recording]:
        """Return the recordings filed in a folder, newest first."""
        await self.get_folder(user_id, folder_id)
        stmt = (
            select(Recording)
            .join(FolderRecording, FolderRecording.recording_id == Recording.id)
            .where(FolderRecording.folder_id == folder_id, Recording.user_id == user_id)
            .order_by(Recording.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Knowledge graph
    # ------------------------------------------------------------------

    async def replace_graph_entries(self, adjacency: dict[str, list[str]]) -> int:
        """Replace the stored ``linked_tags`` of every tag in *adjacency*."""
        if not adjacency:
            return 0
        await self._session.execute(
            delete(KnowledgeGraphEntry).where(KnowledgeGraphEntry.tag.in_(list(adjacency)))
        )
        self._session.add_all(
            KnowledgeGraphEntry(tag=tag, linked_tags=sorted(linked))
            for tag, linked in adjacency.items()
        )
        await self._session.flush()
        return len(adjacency)

    async def list_graph_entries(self) -> list[KnowledgeGraphEntry]:
        result = await self._session.execute(
            select(KnowledgeGraphEntry).order_by(KnowledgeGraphEntry.tag)
        )
        return list(result.scalars().all())
