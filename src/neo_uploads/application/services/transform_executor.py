"""Transform executor.

ONLY transformation - applies one version's transform instruction to an
artifact, producing a new temporary artifact, the same artifact, or nothing.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import inspect
import logging
import os
from typing import Optional, Tuple

from ...core.entities.artifact import Artifact
from ...core.exceptions import TransformError
from ...core.value_objects.transform import (
    Command,
    CustomFunction,
    NoAction,
    Skip,
    TransformInstruction,
)
from ...infrastructure.process.command_runner import CommandRunner
from .temp_path_generator import TempPathGenerator, remove_temp_file

logger = logging.getLogger(__name__)


class TransformExecutor:
    """Executes transform instructions.

    A Command writes to a fresh temp path allocated here; the resulting
    artifact is always temporary and owned by the calling pipeline. Partial
    outputs are removed when the program fails or the task is cancelled.
    """

    def __init__(self, temp_paths: TempPathGenerator, runner: CommandRunner):
        self._temp_paths = temp_paths
        self._runner = runner

    async def apply(
        self,
        instruction: TransformInstruction,
        version: str,
        artifact: Artifact,
    ) -> Optional[Artifact]:
        """Apply ``instruction`` to ``artifact``.

        Returns:
            The input artifact for NoAction, None for Skip, otherwise a new
            artifact

        Raises:
            TransformError: Program exited non-zero or custom function failed
            MissingExecutableError: Program not on the search path (fatal)
        """
        if isinstance(instruction, Skip):
            return None
        if isinstance(instruction, NoAction):
            return artifact
        if isinstance(instruction, Command):
            return await self._run_command(instruction, version, artifact)
        if isinstance(instruction, CustomFunction):
            return await self._run_custom(instruction, version, artifact)
        raise TypeError(f"Unknown transform instruction: {instruction!r}")

    async def _run_command(self, command: Command, version: str, artifact: Artifact) -> Artifact:
        source_path, materialized = self._materialize(artifact)
        try:
            extension = command.output_extension or os.path.splitext(source_path)[1]
            output_path = self._temp_paths.generate(extension)
            args = command.build_args(source_path, output_path)

            try:
                result = await self._runner.run(command.program, args)
            except BaseException:
                remove_temp_file(output_path)
                raise
        finally:
            if materialized:
                remove_temp_file(source_path)

        if not result.succeeded:
            remove_temp_file(output_path)
            logger.warning(
                f"Transform {command.program} for version {version!r} exited "
                f"with {result.exit_code}"
            )
            raise TransformError(
                f"{command.program} exited with status {result.exit_code}",
                output=result.output,
                exit_code=result.exit_code,
                version=version,
                program=command.program,
            )

        return Artifact(file_name=artifact.file_name, path=output_path, is_tempfile=True)

    async def _run_custom(self, custom: CustomFunction, version: str, artifact: Artifact) -> Artifact:
        try:
            if inspect.iscoroutinefunction(custom.fn):
                result = await custom.fn(version, artifact)
            else:
                result = await asyncio.to_thread(custom.fn, version, artifact)
            if inspect.isawaitable(result):
                result = await result
        except TransformError as e:
            if e.version is None:
                e.version = version
                e.details["version"] = version
            raise

        if isinstance(result, TransformError):
            raise result
        if not isinstance(result, Artifact):
            raise TransformError(
                f"custom transform returned {type(result).__name__}, expected Artifact",
                version=version,
            )
        return result

    def _materialize(self, artifact: Artifact) -> Tuple[str, bool]:
        """Ensure in-memory bytes are on disk before a program sees them."""
        if artifact.path:
            return artifact.path, False
        if artifact.binary is None:
            raise TransformError(
                f"artifact {artifact.file_name!r} has neither a path nor bytes"
            )
        path = self._temp_paths.generate(artifact.name_extension)
        with open(path, "wb") as fp:
            fp.write(artifact.binary)
        return path, True


def create_transform_executor(temp_paths: TempPathGenerator, runner: CommandRunner) -> TransformExecutor:
    """Create transform executor."""
    return TransformExecutor(temp_paths, runner)
