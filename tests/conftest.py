"""Pytest configuration and fixtures for neo-uploads tests."""

import asyncio
import os

import pytest

from neo_uploads import (
    Command,
    Definition,
    NO_ACTION,
    SKIP,
    StorageError,
    UploadSettings,
)
from neo_uploads.application.services.version_naming import resolve_file_name, storage_key


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class RecordingBackend:
    """In-memory storage backend recording every call."""

    def __init__(self, fail_versions=(), fail_deletes=(), hang_versions=()):
        self.fail_versions = set(fail_versions)
        self.fail_deletes = set(fail_deletes)
        self.hang_versions = set(hang_versions)
        self.puts = []
        self.deletes = []

    async def put(self, definition, version, artifact, scope):
        if version in self.hang_versions:
            await asyncio.sleep(10)
        if version in self.fail_versions:
            raise StorageError("bucket unavailable", reason="invalid_bucket", backend="memory")
        if artifact.binary is not None:
            content = artifact.binary
        else:
            with open(artifact.path, "rb") as fp:
                content = fp.read()
        self.puts.append((version, artifact.file_name, content))
        return artifact.file_name

    def url(self, definition, version, artifact, scope, options=None):
        url = f"memory://{storage_key(definition, version, artifact, scope)}"
        if options and options.get("signed"):
            url += f"?expires_in={options.get('expires_in')}"
        return url

    async def delete(self, definition, version, artifact, scope):
        if version in self.hang_versions:
            await asyncio.sleep(10)
        if version in self.fail_deletes:
            raise StorageError("delete refused", reason=403, backend="memory")
        self.deletes.append((version, resolve_file_name(definition, version, artifact, scope)))


class ImageDefinition(Definition):
    """Original kept as-is, thumb derived with ``cp`` into a png."""

    versions = ("original", "thumb")

    def transform(self, version, artifact, scope):
        if version == "thumb":
            return Command("cp", "", "png")
        return NO_ACTION

    def filename(self, version, artifact, scope):
        return f"{version}_{artifact.stem}"


class FailingThumbDefinition(ImageDefinition):
    """Thumb transform exits non-zero."""

    def transform(self, version, artifact, scope):
        if version == "thumb":
            return Command("sh", lambda source, output: ["-c", "echo conversion failed; exit 3"])
        return NO_ACTION


class SkipThumbDefinition(ImageDefinition):
    """Thumb is skipped for every file."""

    def transform(self, version, artifact, scope):
        if version == "thumb":
            return SKIP
        return NO_ACTION


@pytest.fixture
def tmp_dir(tmp_path):
    """Pipeline temp directory."""
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path, tmp_dir):
    """Settings isolated from the environment."""
    return UploadSettings(
        tmp_dir=str(tmp_dir),
        version_timeout=5_000,
        storage_dir="uploads",
        storage_dir_prefix=str(tmp_path / "public"),
        bucket="my-bucket",
    )


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def image_definition(settings, backend):
    return ImageDefinition(settings=settings, storage=backend)


@pytest.fixture
def source_file(tmp_path):
    """A caller-owned local file outside the temp directory."""
    directory = tmp_path / "src"
    directory.mkdir()
    path = directory / "image.png"
    path.write_bytes(PNG_BYTES)
    return str(path)


def temp_files(tmp_dir):
    """Files currently left in the pipeline temp directory."""
    return sorted(os.listdir(tmp_dir))
