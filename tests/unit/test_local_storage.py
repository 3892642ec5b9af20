"""Tests for the local filesystem backend."""

import os

import pytest

from neo_uploads import Artifact, StorageError, StoredFile, UploadSettings
from neo_uploads.infrastructure.storage.local_storage import LocalStorage

from conftest import PNG_BYTES, ImageDefinition


class TestLocalStorage:
    """Test local put, url and delete."""

    @pytest.fixture
    def storage(self):
        return LocalStorage()

    @pytest.fixture
    def definition(self, settings, storage):
        return ImageDefinition(settings=settings, storage=storage)

    @pytest.fixture
    def public_dir(self, settings):
        return os.path.join(settings.storage_dir_prefix, "uploads")

    @pytest.mark.asyncio
    async def test_put_copies_path(self, storage, definition, source_file, public_dir):
        artifact = Artifact(file_name="original_image.png", path=source_file)
        assert await storage.put(definition, "original", artifact, None) == "original_image.png"

        with open(os.path.join(public_dir, "original_image.png"), "rb") as fp:
            assert fp.read() == PNG_BYTES

    @pytest.mark.asyncio
    async def test_put_writes_binary(self, storage, definition, public_dir):
        artifact = Artifact(file_name="thumb_image.png", binary=b"bytes")
        await storage.put(definition, "thumb", artifact, None)

        with open(os.path.join(public_dir, "thumb_image.png"), "rb") as fp:
            assert fp.read() == b"bytes"

    @pytest.mark.asyncio
    async def test_put_unreadable_source(self, storage, definition, tmp_path):
        artifact = Artifact(file_name="a.png", path=str(tmp_path / "gone.png"))
        with pytest.raises(StorageError) as exc_info:
            await storage.put(definition, "original", artifact, None)
        assert exc_info.value.version == "original"
        assert exc_info.value.backend == "local"

    def test_url_without_host(self, storage, definition):
        url = storage.url(definition, "original", StoredFile("x y.png"), None)
        assert url == "/uploads/original_x%20y.png"

    def test_url_with_asset_host(self, storage, tmp_dir):
        settings = UploadSettings(tmp_dir=str(tmp_dir), asset_host="https://assets.example.com/")
        definition = ImageDefinition(settings=settings, storage=storage)
        assert storage.url(definition, "thumb", StoredFile("image.png"), None) == (
            "https://assets.example.com/uploads/thumb_image.png"
        )

    @pytest.mark.asyncio
    async def test_delete(self, storage, definition, source_file, public_dir):
        await storage.put(definition, "original", Artifact("original_image.png", path=source_file), None)
        await storage.delete(definition, "original", StoredFile("image.png"), None)
        assert not os.path.exists(os.path.join(public_dir, "original_image.png"))

    @pytest.mark.asyncio
    async def test_delete_missing_file(self, storage, definition):
        with pytest.raises(StorageError):
            await storage.delete(definition, "original", StoredFile("image.png"), None)
