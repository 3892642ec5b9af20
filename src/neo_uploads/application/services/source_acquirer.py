"""Source acquirer.

ONLY input acquisition - normalizes a caller-supplied input (local path,
form-style upload, in-memory blob, remote URL) into a local Artifact.

Following maximum separation architecture - one file = one purpose.
"""

import logging
import os
from typing import Any, Optional
from urllib.parse import unquote

from yarl import URL

from ...core.entities.artifact import Artifact
from ...core.entities.upload_source import BinaryUpload, LocalUpload, RemoteUpload
from ...core.exceptions import InvalidFilePathError
from ...infrastructure.http.remote_file_fetcher import RemoteFileFetcher
from .temp_path_generator import TempPathGenerator

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://")


def is_remote(value: Any) -> bool:
    """True for strings using an http or https scheme."""
    return isinstance(value, str) and value.lower().startswith(REMOTE_SCHEMES)


class SourceAcquirer:
    """Turns upload sources into artifacts.

    Remote and in-memory sources always yield temporary artifacts owned by
    the calling pipeline; local files are never marked temporary.
    """

    def __init__(self, temp_paths: TempPathGenerator, fetcher: RemoteFileFetcher):
        self._temp_paths = temp_paths
        self._fetcher = fetcher

    async def acquire(self, source: Any, definition) -> Artifact:
        """Acquire ``source`` as a local artifact.

        Args:
            source: Local path or http(s) URL string, LocalUpload,
                BinaryUpload or RemoteUpload
            definition: Upload definition (supplies remote fetch headers)

        Returns:
            Artifact with bytes on disk

        Raises:
            InvalidFilePathError: Unknown, missing or malformed source
            FetchError: Remote fetch failed without timing out
            RemoteFetchTimeoutError: Remote fetch kept timing out
        """
        if is_remote(source):
            url = _parse_url(source)
            display_name = unquote(os.path.basename(url.raw_path))
            return await self._fetch(source, display_name, definition, honor_disposition=True)

        if isinstance(source, str):
            return self._local(source, os.path.basename(source))

        if isinstance(source, RemoteUpload):
            if not is_remote(source.remote_url):
                raise InvalidFilePathError(
                    source.remote_url,
                    message="remote_url must use the http or https scheme",
                )
            return await self._fetch(
                source.remote_url, source.filename, definition, honor_disposition=False
            )

        if isinstance(source, BinaryUpload):
            return self._write_binary(source)

        if isinstance(source, LocalUpload):
            return self._local(source.path, source.filename)

        raise InvalidFilePathError(message=f"unsupported upload source: {type(source).__name__}")

    def _local(self, path: str, display_name: str) -> Artifact:
        if not os.path.isfile(path):
            raise InvalidFilePathError(path)
        return Artifact(file_name=display_name, path=path, is_tempfile=False)

    def _write_binary(self, upload: BinaryUpload) -> Artifact:
        file_name = os.path.basename(upload.filename)
        path = self._temp_paths.generate(os.path.splitext(file_name)[1])
        with open(path, "wb") as fp:
            fp.write(upload.binary)
        return Artifact(file_name=file_name, path=path, is_tempfile=True)

    async def _fetch(
        self,
        remote_url: str,
        display_name: str,
        definition,
        honor_disposition: bool,
    ) -> Artifact:
        url = _parse_url(remote_url)
        headers = definition.remote_file_headers(url) or {}
        destination = self._temp_paths.generate(os.path.splitext(display_name)[1])

        fetched = await self._fetcher.fetch(remote_url, destination, headers)

        file_name: Optional[str] = display_name
        if honor_disposition and fetched.filename:
            file_name = fetched.filename
        logger.info(f"Acquired remote file {remote_url} as {file_name!r}")
        return Artifact(file_name=file_name, path=fetched.path, is_tempfile=True)


def _parse_url(value: str) -> URL:
    try:
        return URL(value)
    except ValueError as e:
        raise InvalidFilePathError(value, message=f"malformed remote url: {e}") from e


def create_source_acquirer(temp_paths: TempPathGenerator, fetcher: RemoteFileFetcher) -> SourceAcquirer:
    """Create source acquirer."""
    return SourceAcquirer(temp_paths, fetcher)
