"""Store file command.

ONLY file storing - acquires a source, validates it, derives every declared
version and persists all of them, or none when any derivation fails.

Following maximum separation architecture - one file = one purpose.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from ...config.settings import UploadSettings
from ...core.entities.artifact import Artifact
from ...core.exceptions import (
    AcquisitionError,
    InvalidFileError,
    StorageError,
    TransformError,
    UploadError,
    ValidationRejected,
)
from ...core.value_objects.pipeline_stage import PipelineStage
from ...core.value_objects.transform import NoAction
from ...infrastructure.http.remote_file_fetcher import RemoteFileFetcher
from ...infrastructure.process.command_runner import CommandRunner
from ..services.source_acquirer import SourceAcquirer
from ..services.temp_path_generator import TempPathGenerator, remove_temp_file
from ..services.transform_executor import TransformExecutor
from ..services.version_naming import resolve_file_name
from ..services.version_runner import VersionRunner

logger = logging.getLogger(__name__)

ProcessedVersion = Union[Artifact, None, TransformError]
PersistedVersion = Union[str, None, StorageError]


@dataclass
class StoreFileData:
    """Data required to store a file."""

    # Path, URL, LocalUpload, BinaryUpload or RemoteUpload
    source: Any

    # Caller context handed to every definition callback
    scope: Any = None

    @classmethod
    def from_input(cls, value: Any) -> "StoreFileData":
        """Accept a bare source or a ``(source, scope)`` tuple."""
        if isinstance(value, StoreFileData):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(source=value[0], scope=value[1])
        return cls(source=value)


@dataclass
class StoreFileResult:
    """Result of file store operation."""

    # Required field
    success: bool

    # Optional fields (with defaults)
    file_name: str = ""
    stored: Dict[str, Optional[str]] = field(default_factory=dict)
    stage: Optional[PipelineStage] = None
    store_duration_ms: int = 0

    # Error information
    errors: List[UploadError] = field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def failed(
        cls,
        stage: PipelineStage,
        errors: List[UploadError],
        file_name: str = "",
        duration_ms: int = 0,
    ) -> "StoreFileResult":
        first = errors[0] if errors else None
        return cls(
            success=False,
            file_name=file_name,
            stage=stage,
            store_duration_ms=duration_ms,
            errors=list(errors),
            error_code=first.error_code if first else None,
            error_message="; ".join(e.message for e in errors) or None,
        )


class StoreFileCommand:
    """Command to store a file under every version of a definition.

    Handles the store pipeline:
    - Source acquisition (local path, upload, bytes or remote URL)
    - Caller validation
    - Per-version transformation, all-or-nothing
    - Persistence of every non-skipped version
    - Temp file cleanup on every exit path

    Recoverable failures are returned in the result; MissingExecutableError
    and VersionTimeoutError propagate after cleanup.
    """

    def __init__(
        self,
        definition,
        settings: Optional[UploadSettings] = None,
        acquirer: Optional[SourceAcquirer] = None,
        executor: Optional[TransformExecutor] = None,
        temp_paths: Optional[TempPathGenerator] = None,
    ):
        """Initialize store file command.

        Args:
            definition: Upload definition (versions, transforms, storage)
            settings: Upload settings, defaults to the definition's
            acquirer: Source acquirer override
            executor: Transform executor override
            temp_paths: Temp path generator override
        """
        self._definition = definition
        self._settings = settings or definition.settings
        self._temp_paths = temp_paths or TempPathGenerator(self._settings.temp_directory)
        self._acquirer = acquirer or SourceAcquirer(
            self._temp_paths, RemoteFileFetcher(self._settings)
        )
        self._executor = executor or TransformExecutor(self._temp_paths, CommandRunner())
        self._runner = VersionRunner(definition.concurrent, self._settings.version_timeout)

    async def execute(self, data: Any) -> StoreFileResult:
        """Execute file store operation.

        Args:
            data: StoreFileData, a bare source or a ``(source, scope)`` tuple

        Returns:
            Result of the store operation

        Raises:
            MissingExecutableError: A transform program is not installed
            VersionTimeoutError: A concurrent version exceeded the timeout
        """
        data = StoreFileData.from_input(data)
        start_time = datetime.now(timezone.utc)

        try:
            artifact = await self._acquirer.acquire(data.source, self._definition)
        except AcquisitionError as e:
            logger.warning(f"Could not acquire {data.source!r}: {e.message}")
            return StoreFileResult.failed(
                PipelineStage.ACQUISITION, [e], duration_ms=_elapsed_ms(start_time)
            )

        processed: List[tuple] = []
        try:
            rejection = await self._validate(artifact, data.scope)
            if rejection is not None:
                logger.warning(f"Validation rejected {artifact.file_name}: {rejection.message}")
                return StoreFileResult.failed(
                    PipelineStage.VALIDATION,
                    [rejection],
                    file_name=artifact.file_name,
                    duration_ms=_elapsed_ms(start_time),
                )

            processed = await self._runner.run_all(
                self._definition.versions,
                lambda version: self._process_version(version, artifact, data.scope),
                PipelineStage.PROCESSING,
                discard=lambda version, result: self._discard(result, artifact),
            )

            failures = [result for _, result in processed if isinstance(result, TransformError)]
            if failures:
                logger.warning(
                    f"Processing failed for {artifact.file_name} "
                    f"({', '.join(str(e.version) for e in failures)}), nothing persisted"
                )
                return StoreFileResult.failed(
                    PipelineStage.PROCESSING,
                    failures,
                    file_name=artifact.file_name,
                    duration_ms=_elapsed_ms(start_time),
                )

            derived = dict(processed)
            persisted = await self._runner.run_all(
                self._definition.versions,
                lambda version: self._persist_version(version, derived[version], artifact, data.scope),
                PipelineStage.PERSISTENCE,
            )

            storage_errors = [result for _, result in persisted if isinstance(result, StorageError)]
            if storage_errors:
                return StoreFileResult.failed(
                    PipelineStage.PERSISTENCE,
                    storage_errors,
                    file_name=artifact.file_name,
                    duration_ms=_elapsed_ms(start_time),
                )

            duration_ms = _elapsed_ms(start_time)
            logger.info(
                f"Stored {artifact.file_name} as {len(persisted)} version(s) in {duration_ms}ms"
            )
            return StoreFileResult(
                success=True,
                file_name=artifact.file_name,
                stored=dict(persisted),
                store_duration_ms=duration_ms,
            )
        finally:
            for _, result in processed:
                self._discard(result, artifact)
            if artifact.is_tempfile:
                remove_temp_file(artifact.path)

    async def _validate(self, artifact: Artifact, scope: Any) -> Optional[ValidationRejected]:
        """Normalize the definition's validation outcome to a rejection or None."""
        try:
            outcome = self._definition.validate(artifact, scope)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except ValidationRejected as e:
            return e

        if outcome is True or (isinstance(outcome, str) and outcome == "ok"):
            return None
        if isinstance(outcome, ValidationRejected):
            return outcome
        if isinstance(outcome, tuple) and len(outcome) == 2 and outcome[0] == "error":
            return ValidationRejected(outcome[1], file_name=artifact.file_name)
        return InvalidFileError(artifact.file_name)

    async def _process_version(self, version: str, artifact: Artifact, scope: Any) -> ProcessedVersion:
        instruction = self._definition.instruction(version, artifact, scope)
        try:
            return await self._executor.apply(instruction, version, artifact)
        except TransformError as e:
            return e

    async def _persist_version(
        self,
        version: str,
        derived: Optional[Artifact],
        source: Artifact,
        scope: Any,
    ) -> PersistedVersion:
        if derived is None:
            return None

        file_name = resolve_file_name(self._definition, version, derived, scope)
        renamed = derived.with_file_name(file_name)
        try:
            return await self._definition.storage.put(self._definition, version, renamed, scope)
        except StorageError as e:
            if e.version is None:
                e.version = version
                e.details["version"] = version
            logger.error(f"Persisting version {version!r} of {source.file_name} failed: {e.message}")
            return e
        finally:
            instruction = self._definition.instruction(version, renamed, scope)
            if not isinstance(instruction, NoAction):
                self._discard(renamed, source)

    @staticmethod
    def _discard(result: Any, source: Artifact) -> None:
        """Delete a derived temp artifact unless it is the acquired one."""
        if not isinstance(result, Artifact) or not result.is_tempfile:
            return
        if result.path and result.path != source.path:
            remove_temp_file(result.path)


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)


# Factory function for dependency injection
def create_store_file_command(
    definition,
    settings: Optional[UploadSettings] = None,
    acquirer: Optional[SourceAcquirer] = None,
    executor: Optional[TransformExecutor] = None,
) -> StoreFileCommand:
    """Create store file command."""
    return StoreFileCommand(
        definition=definition,
        settings=settings,
        acquirer=acquirer,
        executor=executor,
    )
