"""Remote file fetcher using aiohttp.

Downloads a remote http(s) file into a local path with timeout handling,
exponential backoff on timeouts, and Content-Disposition filename support.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import aiohttp
from aiohttp import ClientTimeout, ClientError, ClientSession, hdrs
from aiohttp.multipart import parse_content_disposition, content_disposition_filename

from ...config.settings import UploadSettings
from ...core.exceptions import FetchError, RemoteFetchTimeoutError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class FetchedFile:
    """Outcome of a successful remote fetch."""

    path: str
    size_bytes: int
    attempts: int
    filename: Optional[str] = None


def filename_from_content_disposition(header_value: Optional[str]) -> Optional[str]:
    """Extract the decoded filename from a Content-Disposition header.

    Handles quoted ``filename="..."`` values as well as RFC 5987
    ``filename*=UTF-8''...`` values.

    Returns:
        Filename, or None if the header is absent or carries no filename
    """
    if not header_value:
        return None
    _disposition, params = parse_content_disposition(header_value)
    filename = content_disposition_filename(params, "filename")
    return filename or None


class RemoteFileFetcher:
    """HTTP fetcher for remote upload sources.

    Only timeouts (connect or receive) are retried, up to
    ``settings.max_retries`` total attempts with exponential backoff. Any
    other transport failure or a non-200 response fails immediately.
    """

    def __init__(self, settings: UploadSettings, session: Optional[ClientSession] = None):
        """Initialize fetcher.

        Args:
            settings: Upload settings (timeouts and retry policy)
            session: Optional shared aiohttp session; one is created per
                fetch when omitted
        """
        self._settings = settings
        self._session = session

    def _timeout(self) -> ClientTimeout:
        return ClientTimeout(
            total=None,
            sock_connect=self._settings.connect_timeout_seconds,
            sock_read=self._settings.recv_timeout_seconds,
        )

    async def fetch(
        self,
        url: str,
        destination: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> FetchedFile:
        """Download ``url`` into ``destination``.

        Args:
            url: http or https URL
            destination: Local path to write the body to
            headers: Extra request headers

        Returns:
            FetchedFile describing the written file

        Raises:
            RemoteFetchTimeoutError: If every attempt timed out
            FetchError: On non-timeout transport failure or non-200 status
        """
        max_attempts = self._settings.max_retries
        attempt = 0

        while True:
            attempt += 1
            try:
                size, filename = await self._request(url, destination, dict(headers or {}))
                logger.debug(f"Fetched {url} ({size} bytes) on attempt {attempt}")
                return FetchedFile(
                    path=destination,
                    size_bytes=size,
                    attempts=attempt,
                    filename=filename,
                )
            except asyncio.TimeoutError:
                _discard(destination)
                if attempt >= max_attempts:
                    logger.warning(f"Giving up on {url} after {attempt} timed out attempts")
                    raise RemoteFetchTimeoutError(url, attempt)
                delay = self._settings.backoff_delay_seconds(attempt)
                logger.warning(
                    f"Timeout fetching {url} (attempt {attempt}/{max_attempts}), "
                    f"retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)
            except ClientError as e:
                _discard(destination)
                logger.warning(f"Fetching {url} failed: {e}")
                raise FetchError(url, message=f"remote fetch failed: {e}") from e
            except BaseException:
                _discard(destination)
                raise

    async def _request(
        self,
        url: str,
        destination: str,
        headers: Dict[str, str],
    ) -> Tuple[int, Optional[str]]:
        """Perform a single GET attempt, streaming the body to disk."""
        if self._session is not None:
            return await self._get(self._session, url, destination, headers)

        async with aiohttp.ClientSession(timeout=self._timeout()) as session:
            return await self._get(session, url, destination, headers)

    async def _get(
        self,
        session: ClientSession,
        url: str,
        destination: str,
        headers: Dict[str, str],
    ) -> Tuple[int, Optional[str]]:
        async with session.get(
            url,
            headers=headers,
            allow_redirects=True,
            timeout=self._timeout(),
        ) as response:
            if response.status != 200:
                raise FetchError(
                    url,
                    message=f"unexpected status {response.status}",
                    status=response.status,
                )

            size = 0
            with open(destination, "wb") as fp:
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    fp.write(chunk)
                    size += len(chunk)

            filename = filename_from_content_disposition(
                response.headers.get(hdrs.CONTENT_DISPOSITION)
            )
            return size, filename


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def create_remote_file_fetcher(
    settings: UploadSettings,
    session: Optional[ClientSession] = None,
) -> RemoteFileFetcher:
    """Create remote file fetcher."""
    return RemoteFileFetcher(settings, session)
