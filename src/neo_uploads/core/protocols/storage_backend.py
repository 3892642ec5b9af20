"""Storage backend protocol.

ONLY storage backend contract - the three operations every backend (local
filesystem, S3, Azure Blob Storage, or a custom one) provides to the store,
delete and URL pipelines.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING
from typing_extensions import Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...application.definition import Definition
    from ..entities.artifact import Artifact


@runtime_checkable
class StorageBackend(Protocol):
    """Storage backend protocol.

    Backends resolve their own destination (directory, bucket, container)
    through the definition, so the pipeline only ever hands over the
    definition, the version name, the artifact and the opaque scope.
    """

    async def put(
        self,
        definition: "Definition",
        version: str,
        artifact: "Artifact",
        scope: Any,
    ) -> str:
        """Persist one version of a file.

        Args:
            definition: Upload definition driving naming and placement
            version: Version name being stored
            artifact: Artifact whose ``file_name`` is already the resolved
                destination name
            scope: Opaque caller context

        Returns:
            Stored file name

        Raises:
            StorageError: If the backend rejected or failed the write
        """
        ...

    def url(
        self,
        definition: "Definition",
        version: str,
        artifact: Any,
        scope: Any,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Build the URL of a stored version.

        Args:
            definition: Upload definition driving naming and placement
            version: Version name
            artifact: Stored file reference (anything with ``file_name``)
            scope: Opaque caller context
            options: Backend options such as ``signed`` and ``expires_in``

        Returns:
            URL string
        """
        ...

    async def delete(
        self,
        definition: "Definition",
        version: str,
        artifact: Any,
        scope: Any,
    ) -> None:
        """Remove one stored version.

        Raises:
            StorageError: If the backend failed the delete
        """
        ...
