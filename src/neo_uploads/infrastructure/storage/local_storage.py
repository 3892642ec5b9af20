"""Local filesystem storage backend.

ONLY local storage - writes versions under
``storage_dir_prefix/storage_dir/`` on the local disk and builds URLs
relative to the definition's asset host.

Serve the storage directory with your web server (or a static files
route) under the same path to make the URLs resolvable.
"""

import asyncio
import logging
import os
import shutil
from typing import Any, Dict, Optional
from urllib.parse import quote

from ...core.entities.artifact import Artifact
from ...core.exceptions import StorageError
from ...application.services.version_naming import resolve_file_name

logger = logging.getLogger(__name__)

# Characters left as-is when percent-encoding URLs
URL_SAFE = ":/?#[]@!$&'()*+,;=%~"

BACKEND = "local"


class LocalStorage:
    """Store versions on the local filesystem."""

    async def put(self, definition, version: str, artifact: Artifact, scope: Any) -> str:
        """Write ``artifact`` to its destination, creating directories."""
        destination = os.path.join(
            definition.storage_dir_prefix() or "",
            definition.storage_dir(version, artifact, scope) or "",
            artifact.file_name,
        )
        try:
            await asyncio.to_thread(_write, artifact, destination)
        except OSError as e:
            logger.error(f"Local put of {artifact.file_name} ({version}) to {destination} failed: {e}")
            raise StorageError(
                f"could not write {destination}",
                version=version,
                reason=e,
                backend=BACKEND,
            ) from e

        logger.debug(f"Stored {version} at {destination}")
        return artifact.file_name

    def url(
        self,
        definition,
        version: str,
        artifact: Any,
        scope: Any,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """``asset_host/storage_dir/name``, or an absolute path without a host."""
        local_path = "/".join(
            part.strip("/")
            for part in (
                definition.storage_dir(version, artifact, scope) or "",
                resolve_file_name(definition, version, artifact, scope),
            )
            if part and part.strip("/")
        )
        host = definition.asset_host()
        url = f"{host.rstrip('/')}/{local_path}" if host else f"/{local_path}"
        return quote(url, safe=URL_SAFE)

    async def delete(self, definition, version: str, artifact: Any, scope: Any) -> None:
        """Remove the stored file of ``version``."""
        path = os.path.join(
            definition.storage_dir_prefix() or "",
            definition.storage_dir(version, artifact, scope) or "",
            resolve_file_name(definition, version, artifact, scope),
        )
        try:
            await asyncio.to_thread(os.remove, path)
        except OSError as e:
            raise StorageError(
                f"could not delete {path}",
                version=version,
                reason=e,
                backend=BACKEND,
            ) from e


def _write(artifact: Artifact, destination: str) -> None:
    os.makedirs(os.path.dirname(destination) or ".", exist_ok=True)
    if artifact.binary is not None:
        with open(destination, "wb") as fp:
            fp.write(artifact.binary)
    else:
        shutil.copyfile(artifact.path, destination)


def create_local_storage() -> LocalStorage:
    """Create local storage backend."""
    return LocalStorage()
