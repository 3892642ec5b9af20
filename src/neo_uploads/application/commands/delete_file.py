"""Delete file command.

ONLY file deletion - removes every stored version of a file from the
definition's storage backend, attempting all versions and aggregating
failures.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from ...config.settings import UploadSettings
from ...core.entities.artifact import Artifact, StoredFile
from ...core.exceptions import StorageError
from ...core.value_objects.pipeline_stage import PipelineStage
from ...core.value_objects.transform import Skip
from ..services.version_runner import VersionRunner

logger = logging.getLogger(__name__)

_DELETED = "deleted"
_SKIPPED = "skipped"


@dataclass
class DeleteFileData:
    """Data required to delete a file."""

    # Stored display name (e.g. "image.png")
    file_name: str

    # Caller context handed to every definition callback
    scope: Any = None

    @classmethod
    def from_input(cls, value: Any) -> "DeleteFileData":
        """Accept a name, a StoredFile/Artifact or a ``(file, scope)`` tuple."""
        if isinstance(value, DeleteFileData):
            return value
        scope = None
        if isinstance(value, tuple) and len(value) == 2:
            value, scope = value
        if isinstance(value, (StoredFile, Artifact)):
            value = value.file_name
        return cls(file_name=value, scope=scope)


@dataclass
class DeleteFileResult:
    """Result of file deletion operation."""

    # Required fields
    success: bool
    file_name: str

    # Optional fields (with defaults)
    deleted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    stage: Optional[PipelineStage] = None
    deletion_duration_ms: int = 0

    # Error information
    errors: List[StorageError] = field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class DeleteFileCommand:
    """Command to delete every version of a stored file.

    Skipped versions succeed without contacting the backend. There is no
    all-or-nothing gate: a failing version does not stop the others, and
    the result lists every failure.
    """

    def __init__(self, definition, settings: Optional[UploadSettings] = None):
        """Initialize delete file command.

        Args:
            definition: Upload definition (versions, naming, storage)
            settings: Upload settings, defaults to the definition's
        """
        self._definition = definition
        self._settings = settings or definition.settings
        self._runner = VersionRunner(definition.concurrent, self._settings.version_timeout)

    async def execute(self, data: Any) -> DeleteFileResult:
        """Execute file deletion.

        Args:
            data: DeleteFileData, a file name or a ``(file, scope)`` tuple

        Returns:
            Result of the deletion

        Raises:
            VersionTimeoutError: A concurrent version exceeded the timeout
        """
        data = DeleteFileData.from_input(data)
        start_time = datetime.now(timezone.utc)
        stored = StoredFile(data.file_name)

        outcomes = await self._runner.run_all(
            self._definition.versions,
            lambda version: self._delete_version(version, stored, data.scope),
            PipelineStage.DELETION,
        )

        deleted = [version for version, outcome in outcomes if outcome == _DELETED]
        skipped = [version for version, outcome in outcomes if outcome == _SKIPPED]
        errors = [outcome for _, outcome in outcomes if isinstance(outcome, StorageError)]
        duration_ms = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)

        if errors:
            logger.warning(
                f"Deleting {data.file_name} failed for "
                f"{', '.join(str(e.version) for e in errors)}"
            )
            return DeleteFileResult(
                success=False,
                file_name=data.file_name,
                deleted=deleted,
                skipped=skipped,
                stage=PipelineStage.DELETION,
                deletion_duration_ms=duration_ms,
                errors=errors,
                error_code=errors[0].error_code,
                error_message="; ".join(e.message for e in errors),
            )

        logger.info(f"Deleted {len(deleted)} version(s) of {data.file_name}")
        return DeleteFileResult(
            success=True,
            file_name=data.file_name,
            deleted=deleted,
            skipped=skipped,
            deletion_duration_ms=duration_ms,
        )

    async def _delete_version(
        self, version: str, stored: StoredFile, scope: Any
    ) -> Union[str, StorageError]:
        instruction = self._definition.instruction(version, stored, scope)
        if isinstance(instruction, Skip):
            return _SKIPPED

        try:
            await self._definition.storage.delete(self._definition, version, stored, scope)
        except StorageError as e:
            if e.version is None:
                e.version = version
                e.details["version"] = version
            logger.error(f"Deleting version {version!r} of {stored.file_name} failed: {e.message}")
            return e
        return _DELETED


# Factory function for dependency injection
def create_delete_file_command(
    definition, settings: Optional[UploadSettings] = None
) -> DeleteFileCommand:
    """Create delete file command."""
    return DeleteFileCommand(definition=definition, settings=settings)
