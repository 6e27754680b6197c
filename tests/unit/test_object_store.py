"""Tests for the filesystem-backed audio bucket."""

import pytest

from src.core.exceptions import StorageForbiddenError, UploadError
from src.services.storage.object_store import check_owner

KEY = "user-1/1700000000000.webm"


class TestOwnership:
    def test_own_key_allowed(self):
        check_owner(KEY, "user-1")

    @pytest.mark.parametrize(
        "key",
        [
            "user-2/1700000000000.webm",
            "1700000000000.webm",
            "user-1/../user-2/x.webm",
        ],
    )
    def test_foreign_keys_rejected(self, key):
        with pytest.raises(StorageForbiddenError):
            check_owner(key, "user-1")


class TestUpload:
    async def test_upload_returns_public_url(self, storage):
        url = await storage.upload(KEY, b"audio", "user-1", "audio/webm")

        assert url == f"http://test/storage/v1/object/public/recordings/{KEY}"
        assert (storage.bucket_dir / KEY).read_bytes() == b"audio"

    async def test_upload_into_other_namespace_is_forbidden(self, storage):
        with pytest.raises(StorageForbiddenError):
            await storage.upload(KEY, b"audio", "user-2", "audio/webm")
        assert not (storage.bucket_dir / KEY).exists()

    async def test_duplicate_key_is_upload_error(self, storage):
        await storage.upload(KEY, b"first", "user-1", "audio/webm")
        with pytest.raises(UploadError):
            await storage.upload(KEY, b"second", "user-1", "audio/webm")
        assert (storage.bucket_dir / KEY).read_bytes() == b"first"

    async def test_download(self, storage):
        await storage.upload(KEY, b"audio", "user-1", "audio/webm")
        assert await storage.download(KEY) == b"audio"

    async def test_download_missing(self, storage):
        with pytest.raises(FileNotFoundError):
            await storage.download("user-1/missing.webm")


class TestRemove:
    async def test_remove(self, storage):
        await storage.upload(KEY, b"audio", "user-1", "audio/webm")
        assert await storage.remove(KEY, "user-1") is True
        assert not (storage.bucket_dir / KEY).exists()

    async def test_remove_missing_returns_false(self, storage):
        assert await storage.remove(KEY, "user-1") is False

    async def test_remove_other_users_object_is_forbidden(self, storage):
        await storage.upload(KEY, b"audio", "user-1", "audio/webm")
        with pytest.raises(StorageForbiddenError):
            await storage.remove(KEY, "user-2")
        assert (storage.bucket_dir / KEY).exists()


class TestUrls:
    def test_key_from_url_round_trip(self, storage):
        assert storage.key_from_url(storage.public_url(KEY)) == KEY

    def test_key_from_foreign_url(self, storage):
        assert storage.key_from_url("https://elsewhere.test/a.webm") is None
