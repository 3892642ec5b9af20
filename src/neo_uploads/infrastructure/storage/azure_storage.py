"""Azure Blob Storage backend.

ONLY Azure storage - uploads versions as block blobs over the Blob REST API
with Shared Key authorization, builds plain or SAS URLs and deletes blobs.

Account, container and access key come from the definition
(``storage_account``, ``container``, ``access_key``), which default to the
``NEO_UPLOADS_AZURE_*`` settings.

``Definition.azure_blob_headers`` may return ``content_type`` (sent as
``Content-Type``), raw ``x-ms-*`` headers, or snake_case blob properties
such as ``cache_control`` (sent as ``x-ms-blob-cache-control``).
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout

from ...application.services.version_naming import storage_key
from ...config.settings import UploadSettings, get_settings
from ...core.entities.artifact import Artifact
from ...core.exceptions import StorageError
from .azure_sas import (
    API_VERSION,
    DEFAULT_SAS_EXPIRY,
    blob_url,
    generate_sas_url,
    rfc1123_now,
    shared_key_authorization,
)

logger = logging.getLogger(__name__)

BACKEND = "azure"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class AzureStorage:
    """Store versions as Azure block blobs."""

    def __init__(
        self,
        session: Optional[ClientSession] = None,
        settings: Optional[UploadSettings] = None,
    ):
        """Initialize Azure storage.

        Args:
            session: Optional shared aiohttp session; one is created per
                request when omitted
            settings: Upload settings (request timeouts)
        """
        self._session = session
        self._settings = settings or get_settings()

    async def put(self, definition, version: str, artifact: Artifact, scope: Any) -> str:
        """Upload ``artifact`` as the blob ``storage_dir/file_name``."""
        account, container, access_key = self._credentials(definition, artifact, scope, version)
        directory = definition.storage_dir(version, artifact, scope) or ""
        blob_name = f"{directory.rstrip('/')}/{artifact.file_name}" if directory else artifact.file_name

        if artifact.binary is not None:
            body = artifact.binary
        else:
            try:
                body = await asyncio.to_thread(_read, artifact.path)
            except OSError as e:
                logger.error(f"Azure upload of {blob_name} ({version}): file read failed: {e}")
                raise StorageError(
                    f"could not read {artifact.path}",
                    version=version,
                    reason=e,
                    backend=BACKEND,
                ) from e

        headers = blob_headers(definition.azure_blob_headers(version, artifact, scope))
        headers.update({
            "x-ms-date": rfc1123_now(),
            "x-ms-version": API_VERSION,
            "x-ms-blob-type": "BlockBlob",
            "Content-Length": str(len(body)),
        })
        headers.setdefault("Content-Type", DEFAULT_CONTENT_TYPE)
        headers["Authorization"] = shared_key_authorization(
            "PUT", account, container, blob_name, access_key, headers
        )

        status = await self._send("PUT", blob_url(account, container, blob_name), headers, body, version)
        if status != 201:
            logger.error(f"Azure upload of {blob_name} ({version}) failed with status {status}")
            raise StorageError(
                f"upload failed with status {status}",
                version=version,
                reason=status,
                backend=BACKEND,
            )

        logger.debug(f"Uploaded {version} to {container}/{blob_name}")
        return artifact.file_name

    def url(
        self,
        definition,
        version: str,
        artifact: Any,
        scope: Any,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Plain blob URL, or a read-only SAS URL when ``signed`` is set."""
        options = options or {}
        blob_name = storage_key(definition, version, artifact, scope)
        account = definition.storage_account(artifact, scope)
        container = definition.container(artifact, scope)

        if options.get("signed"):
            access_key = definition.access_key(artifact, scope)
            expires_in = options.get("expires_in") or options.get("expire_in") or DEFAULT_SAS_EXPIRY
            try:
                return generate_sas_url(account, container, blob_name, access_key, expires_in)
            except (TypeError, ValueError) as e:
                logger.error(f"Failed to generate signed URL for {blob_name}: {e}")

        return blob_url(account, container, blob_name)

    async def delete(self, definition, version: str, artifact: Any, scope: Any) -> None:
        """Delete the blob of ``version``; an already missing blob is fine."""
        account, container, access_key = self._credentials(definition, artifact, scope, version)
        blob_name = storage_key(definition, version, artifact, scope)

        headers = {
            "x-ms-date": rfc1123_now(),
            "x-ms-version": API_VERSION,
        }
        headers["Authorization"] = shared_key_authorization(
            "DELETE", account, container, blob_name, access_key, headers
        )

        status = await self._send("DELETE", blob_url(account, container, blob_name), headers, None, version)
        if status == 404:
            logger.debug(f"Blob {container}/{blob_name} was already gone")
        elif status != 202:
            logger.error(f"Azure delete of {blob_name} ({version}) failed with status {status}")
            raise StorageError(
                f"delete failed with status {status}",
                version=version,
                reason=status,
                backend=BACKEND,
            )

    async def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
        version: str,
    ) -> int:
        try:
            if self._session is not None:
                return await self._request(self._session, method, url, headers, body)
            async with aiohttp.ClientSession(timeout=self._timeout()) as session:
                return await self._request(session, method, url, headers, body)
        except (ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Azure {method} {url} failed: {e}")
            raise StorageError(
                f"{method} request failed: {e}",
                version=version,
                reason=e,
                backend=BACKEND,
            ) from e

    async def _request(
        self,
        session: ClientSession,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
    ) -> int:
        async with session.request(method, url, headers=headers, data=body) as response:
            if response.status >= 300:
                logger.debug(f"Azure response body: {await response.text()}")
            return response.status

    def _timeout(self) -> ClientTimeout:
        return ClientTimeout(
            total=None,
            sock_connect=self._settings.connect_timeout_seconds,
            sock_read=self._settings.recv_timeout_seconds,
        )

    @staticmethod
    def _credentials(definition, artifact: Any, scope: Any, version: str):
        account = definition.storage_account(artifact, scope)
        container = definition.container(artifact, scope)
        access_key = definition.access_key(artifact, scope)
        if not (account and container and access_key):
            raise StorageError(
                "Azure storage account, container and access key must be configured",
                version=version,
                reason="missing_configuration",
                backend=BACKEND,
            )
        return account, container, access_key


def blob_headers(headers: Any) -> Dict[str, str]:
    """Convert definition blob headers to request headers."""
    items = headers.items() if isinstance(headers, dict) else (headers or [])
    converted = {}
    for name, value in items:
        name = str(name)
        if name.lower() in ("content_type", "content-type"):
            converted["Content-Type"] = str(value)
        elif name.lower().startswith("x-ms-"):
            converted[name.lower()] = str(value)
        else:
            converted["x-ms-blob-" + name.lower().replace("_", "-")] = str(value)
    return converted


def _read(path: str) -> bytes:
    with open(path, "rb") as fp:
        return fp.read()


def create_azure_storage(
    session: Optional[ClientSession] = None,
    settings: Optional[UploadSettings] = None,
) -> AzureStorage:
    """Create Azure storage backend."""
    return AzureStorage(session=session, settings=settings)
