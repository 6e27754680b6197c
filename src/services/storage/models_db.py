"""
SQLAlchemy ORM models for the EchoVault schema.

Tables: ``profiles``, ``recordings``, ``highlights``, ``folders``,
``folder_recordings``, ``knowledge_graph``. Primary keys are UUID strings
generated client-side.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from src.services.storage.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Profile(Base):
    """One row per user account."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_now)

    def __repr__(self) -> str:
        return f"<Profile id={self.id!r}>"


class Recording(Base):
    """A saved voice capture with its transcript and analysis."""

    __tablename__ = "recordings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    audio_url: Mapped[str | None] = mapped_column(String(1024), unique=True, nullable=True)
    transcription: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    sentiment: Mapped[str | None] = mapped_column(String(16), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_formatted: Mapped[str | None] = mapped_column(String(16), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_now, index=True)

    highlights: Mapped[list["Highlight"]] = relationship(
        back_populates="recording",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="Highlight.timestamp_seconds",
    )

    def __repr__(self) -> str:
        return f"<Recording id={self.id!r} user={self.user_id!r}>"


class Highlight(Base):
    """A timestamped excerpt of a recording, produced by analysis."""

    __tablename__ = "highlights"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    recording_id: Mapped[str] = mapped_column(
        ForeignKey("recordings.id", ondelete="CASCADE"), index=True
    )
    timestamp_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    recording: Mapped["Recording"] = relationship(back_populates="highlights")

    def __repr__(self) -> str:
        return f"<Highlight id={self.id!r} recording={self.recording_id!r}>"


class Folder(Base):
    """A user-owned named group of recordings."""

    __tablename__ = "folders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(default=_now)

    entries: Mapped[list["FolderRecording"]] = relationship(
        back_populates="folder",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Folder id={self.id!r} name={self.name!r}>"


class FolderRecording(Base):
    """Many-to-many join between folders and recordings."""

    __tablename__ = "folder_recordings"
    __table_args__ = (UniqueConstraint("folder_id", "recording_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    folder_id: Mapped[str] = mapped_column(ForeignKey("folders.id", ondelete="CASCADE"))
    recording_id: Mapped[str] = mapped_column(ForeignKey("recordings.id", ondelete="CASCADE"))

    folder: Mapped["Folder"] = relationship(back_populates="entries")


class KnowledgeGraphEntry(Base):
    """A tag and the tags it co-occurs with (global, not per user)."""

    __tablename__ = "knowledge_graph"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    tag: Mapped[str] = mapped_column(String(255), index=True)
    linked_tags: Mapped[list] = mapped_column(JSON, default=list)
