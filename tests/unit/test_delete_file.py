"""Tests for the delete pipeline."""

import pytest

from neo_uploads import (
    DeleteFileCommand,
    DeleteFileData,
    PipelineStage,
    StoredFile,
    UploadSettings,
    VersionTimeoutError,
)

from conftest import ImageDefinition, RecordingBackend, SkipThumbDefinition


class TestDeleteFileCommand:
    """Test version deletion and failure aggregation."""

    @pytest.mark.asyncio
    async def test_deletes_every_version(self, image_definition, backend):
        result = await DeleteFileCommand(image_definition).execute(DeleteFileData("image.png"))

        assert result.success is True
        assert result.deleted == ["original", "thumb"]
        assert sorted(backend.deletes) == [
            ("original", "original_image.png"),
            ("thumb", "thumb_image.png"),
        ]

    @pytest.mark.asyncio
    async def test_one_failing_version_does_not_stop_the_other(self, settings):
        backend = RecordingBackend(fail_deletes={"thumb"})
        definition = ImageDefinition(settings=settings, storage=backend)

        result = await DeleteFileCommand(definition).execute(DeleteFileData("image.png"))

        assert result.success is False
        assert result.stage == PipelineStage.DELETION
        assert backend.deletes == [("original", "original_image.png")]
        assert [e.version for e in result.errors] == ["thumb"]
        assert result.error_message == "delete refused"

    @pytest.mark.asyncio
    async def test_skipped_version_never_reaches_backend(self, settings):
        backend = RecordingBackend(fail_deletes={"thumb"})
        definition = SkipThumbDefinition(settings=settings, storage=backend)

        result = await DeleteFileCommand(definition).execute(DeleteFileData("image.png"))

        assert result.success is True
        assert result.skipped == ["thumb"]
        assert backend.deletes == [("original", "original_image.png")]

    @pytest.mark.asyncio
    async def test_accepts_stored_file_with_scope(self, settings, backend):
        class ScopedDefinition(ImageDefinition):
            def storage_dir(self, version, artifact, scope):
                return f"uploads/{scope['id']}"

        definition = ScopedDefinition(settings=settings, storage=backend)
        result = await DeleteFileCommand(definition).execute((StoredFile("image.png"), {"id": 3}))

        assert result.success is True
        assert result.file_name == "image.png"

    @pytest.mark.asyncio
    async def test_version_timeout_aborts_delete(self, tmp_dir):
        settings = UploadSettings(tmp_dir=str(tmp_dir), version_timeout=200)
        backend = RecordingBackend(hang_versions={"thumb"})
        definition = ImageDefinition(settings=settings, storage=backend)

        with pytest.raises(VersionTimeoutError) as exc_info:
            await DeleteFileCommand(definition).execute(DeleteFileData("image.png"))

        assert exc_info.value.version == "thumb"
        assert exc_info.value.stage == PipelineStage.DELETION.value
