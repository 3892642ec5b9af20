"""External command runner.

ONLY process invocation - runs transformation programs (ImageMagick,
ffmpeg, arbitrary executables) with combined stdout/stderr capture.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ...core.exceptions import MissingExecutableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one program invocation."""

    program: str
    args: List[str]
    exit_code: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """Runs executables found on the search path."""

    def __init__(self, search_path: Optional[str] = None):
        """Initialize runner.

        Args:
            search_path: PATH override used to resolve programs
        """
        self._search_path = search_path

    def ensure_executable_exists(self, program: str) -> str:
        """Resolve ``program`` on the search path.

        Raises:
            MissingExecutableError: If the program cannot be found
        """
        executable = shutil.which(program, path=self._search_path)
        if executable is None:
            logger.error(f"Transform program not found on PATH: {program}")
            raise MissingExecutableError(program)
        return executable

    async def run(self, program: str, args: Sequence[str]) -> CommandResult:
        """Run ``program`` with ``args`` and wait for it to exit.

        The child process is killed if the awaiting task is cancelled.
        """
        executable = self.ensure_executable_exists(program)
        arg_list = [str(arg) for arg in args]
        logger.debug(f"Running {program} {' '.join(arg_list)}")

        process = await asyncio.create_subprocess_exec(
            executable,
            *arg_list,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        try:
            stdout, _ = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        return CommandResult(
            program=program,
            args=arg_list,
            exit_code=process.returncode,
            output=output,
        )


def create_command_runner(search_path: Optional[str] = None) -> CommandRunner:
    """Create command runner."""
    return CommandRunner(search_path)
