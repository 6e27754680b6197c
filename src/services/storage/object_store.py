"""
Object storage for audio files.

``BaseObjectStorage`` is the bucket contract the pipeline and library
views rely on; ``LocalObjectStorage`` keeps objects on disk under
``{storage_dir}/{bucket}/`` and exposes them at public-read URLs that the
API serves as static files.

Writes and deletes are restricted to keys whose first path segment is the
caller's user id.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from src.core.config import get_settings
from src.core.exceptions import StorageForbiddenError, UploadError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/storage/v1/object/public"


def check_owner(key: str, owner_id: str) -> None:
    """Raise :class:`StorageForbiddenError` unless *key* lives under ``{owner_id}/``."""
    parts = PurePosixPath(key).parts
    if len(parts) < 2 or parts[0] != owner_id or ".." in parts:
        raise StorageForbiddenError(key)


class BaseObjectStorage(ABC):
    """Interface for a single public-read bucket."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, owner_id: str, content_type: str) -> str:
        """Store *data* under *key* and return its public URL.

        Raises:
            StorageForbiddenError: *key* is outside the owner's namespace.
            UploadError: The object could not be written (or already exists).
        """

    @abstractmethod
    async def remove(self, key: str, owner_id: str) -> bool:
        """Delete an object; returns False if there was nothing to delete."""

    @abstractmethod
    async def download(self, key: str) -> bytes:
        """Return the object's bytes (raises ``FileNotFoundError`` if absent)."""

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Public-read URL for *key*."""

    @abstractmethod
    def key_from_url(self, url: str) -> str | None:
        """Inverse of :meth:`public_url`; None for URLs outside this bucket."""


class LocalObjectStorage(BaseObjectStorage):
    """Filesystem-backed bucket.

    Args:
        root: Storage root directory (the bucket is a subdirectory).
        bucket: Bucket name.
        public_base_url: Origin the API is reachable at, used to build URLs.
    """

    def __init__(
        self,
        root: str | Path | None = None,
        bucket: str | None = None,
        public_base_url: str | None = None,
    ) -> None:
        settings = get_settings()
        self.bucket = bucket or settings.storage_bucket
        self.root = Path(root or settings.storage_dir).resolve()
        self._bucket_dir = self.root / self.bucket
        self._base_url = (public_base_url or settings.public_base_url).rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self._bucket_dir

    def _path_for(self, key: str) -> Path:
        path = (self._bucket_dir / key).resolve()
        # Prevent path traversal: only allow paths inside the bucket
        if not path.is_relative_to(self._bucket_dir):
            raise StorageForbiddenError(key)
        return path

    async def upload(self, key: str, data: bytes, owner_id: str, content_type: str) -> str:
        check_owner(key, owner_id)
        path = self._path_for(key)
        if path.exists():
            raise UploadError(f"The resource already exists: {key}")

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            logger.error("Upload failed for %s: %s", key, exc)
            raise UploadError(f"Failed to upload {key}: {exc}") from exc

        logger.info("Stored %s (%s bytes, %s)", key, len(data), content_type)
        return self.public_url(key)

    async def remove(self, key: str, owner_id: str) -> bool:
        check_owner(key, owner_id)
        path = self._path_for(key)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        return True

    async def download(self, key: str) -> bytes:
        return await asyncio.to_thread(self._path_for(key).read_bytes)

    def public_url(self, key: str) -> str:
        return f"{self._base_url}{PUBLIC_PREFIX}/{self.bucket}/{key}"

    def key_from_url(self, url: str) -> str | None:
        prefix = f"{self._base_url}{PUBLIC_PREFIX}/{self.bucket}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix) :] or None
