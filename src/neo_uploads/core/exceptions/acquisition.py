"""Source acquisition exceptions.

Raised while turning a caller-supplied input into a local artifact. Surfaced
directly to the caller; retries are local to acquisition.
"""

from typing import Optional

from .base import UploadError


class AcquisitionError(UploadError):
    """Base class for input acquisition errors."""
    pass


class InvalidFilePathError(AcquisitionError):
    """Input did not resolve to a readable local file or remote reference."""

    def __init__(self, path: Optional[str] = None, message: str = "invalid file path"):
        details = {"path": path} if path else {}
        super().__init__(message, error_code="INVALID_FILE_PATH", details=details)
        self.path = path


class FetchError(AcquisitionError):
    """Remote fetch failed with a non-retriable condition."""

    def __init__(
        self,
        url: str,
        message: str = "remote fetch failed",
        status: Optional[int] = None,
    ):
        details = {"url": url}
        if status is not None:
            details["status"] = status
        super().__init__(message, error_code="FETCH_ERROR", details=details)
        self.url = url
        self.status = status


class RemoteFetchTimeoutError(AcquisitionError):
    """Remote fetch kept timing out until retries were exhausted."""

    def __init__(self, url: str, attempts: int):
        super().__init__(
            f"remote fetch timed out after {attempts} attempts",
            error_code="FETCH_TIMEOUT",
            details={"url": url, "attempts": attempts},
        )
        self.url = url
        self.attempts = attempts
