"""End-to-end tests: Uploader with the local filesystem backend."""

import os

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from neo_uploads import BinaryUpload, Uploader
from neo_uploads.infrastructure.storage.local_storage import LocalStorage

from conftest import PNG_BYTES, ImageDefinition, temp_files


def remote_app():
    async def download(request):
        return web.Response(
            body=PNG_BYTES,
            headers={"Content-Disposition": 'attachment; filename="x y.png"'},
        )

    app = web.Application()
    app.router.add_get("/download", download)
    return app


class TestUploaderLocal:
    """Store, address and delete files on local disk."""

    @pytest.fixture
    def uploader(self, settings):
        return Uploader(ImageDefinition(settings=settings, storage=LocalStorage()))

    @pytest.fixture
    def public_dir(self, settings):
        return os.path.join(settings.storage_dir_prefix, "uploads")

    @pytest.mark.asyncio
    async def test_store_url_delete(self, uploader, public_dir, source_file, tmp_dir):
        result = await uploader.store(source_file)

        assert result.success is True
        assert sorted(os.listdir(public_dir)) == ["original_image.png", "thumb_image.png"]
        assert temp_files(tmp_dir) == []

        assert uploader.urls(result.file_name) == {
            "original": "/uploads/original_image.png",
            "thumb": "/uploads/thumb_image.png",
        }

        deleted = await uploader.delete(result.file_name)
        assert deleted.success is True
        assert os.listdir(public_dir) == []

    @pytest.mark.asyncio
    async def test_store_remote_file(self, uploader, public_dir, tmp_dir):
        async with TestServer(remote_app()) as server:
            result = await uploader.store(str(server.make_url("/download")))

        assert result.success is True
        assert result.file_name == "x y.png"
        assert sorted(os.listdir(public_dir)) == ["original_x y.png", "thumb_x y.png"]
        assert uploader.url(result.file_name, "thumb") == "/uploads/thumb_x%20y.png"
        assert temp_files(tmp_dir) == []

    @pytest.mark.asyncio
    async def test_store_with_scope(self, settings, tmp_dir):
        class ScopedDefinition(ImageDefinition):
            def storage_dir(self, version, artifact, scope):
                return f"uploads/users/{scope['id']}"

        uploader = Uploader(ScopedDefinition(settings=settings, storage=LocalStorage()))
        result = await uploader.store(BinaryUpload("avatar.png", PNG_BYTES), scope={"id": 9})

        assert result.success is True
        stored = os.path.join(settings.storage_dir_prefix, "uploads", "users", "9", "thumb_avatar.png")
        with open(stored, "rb") as fp:
            assert fp.read() == PNG_BYTES
        assert uploader.url("avatar.png", scope={"id": 9}) == "/uploads/users/9/original_avatar.png"
        assert temp_files(tmp_dir) == []
