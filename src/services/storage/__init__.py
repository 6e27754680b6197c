"""
Storage module - Database and object storage operations.
"""

from src.services.storage.database import (
    Base,
    close_db,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from src.services.storage.models_db import (
    Folder,
    FolderRecording,
    Highlight,
    KnowledgeGraphEntry,
    Profile,
    Recording,
)
from src.services.storage.object_store import BaseObjectStorage, LocalObjectStorage
from src.services.storage.repository import RecordingRepository

__all__ = [
    "Base",
    "BaseObjectStorage",
    "Folder",
    "FolderRecording",
    "Highlight",
    "KnowledgeGraphEntry",
    "LocalObjectStorage",
    "Profile",
    "Recording",
    "RecordingRepository",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]
