"""Fatal exceptions.

These abort a store or delete call instead of being reported in its result.
"""

from .base import UploadAbort


class MissingExecutableError(UploadAbort):
    """Configured transform program is not on the search path."""

    def __init__(self, program: str):
        super().__init__(
            f"executable not found on PATH: {program}",
            details={"program": program},
        )
        self.program = program


class VersionTimeoutError(UploadAbort):
    """A concurrent version task exceeded the version timeout."""

    def __init__(self, version: str, timeout_ms: int, stage: str):
        super().__init__(
            f"version {version!r} exceeded {timeout_ms}ms during {stage}",
            details={"version": version, "timeout_ms": timeout_ms, "stage": stage},
        )
        self.version = version
        self.timeout_ms = timeout_ms
        self.stage = stage
