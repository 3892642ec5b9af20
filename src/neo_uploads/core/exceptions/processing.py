"""Transformation exceptions."""

from typing import Optional

from .base import UploadError


class TransformError(UploadError):
    """A version's transformation failed.

    Raised when an external program exits non-zero (``output`` holds the
    combined stdout/stderr) or a custom transform reports an error.
    """

    def __init__(
        self,
        message: str,
        output: str = "",
        exit_code: Optional[int] = None,
        version: Optional[str] = None,
        program: Optional[str] = None,
    ):
        details = {"output": output}
        if exit_code is not None:
            details["exit_code"] = exit_code
        if version is not None:
            details["version"] = version
        if program is not None:
            details["program"] = program
        super().__init__(message, error_code="TRANSFORM_ERROR", details=details)
        self.output = output
        self.exit_code = exit_code
        self.version = version
        self.program = program
