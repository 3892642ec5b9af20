"""Storage backend exceptions."""

from typing import Any, Optional

from .base import UploadError


class StorageError(UploadError):
    """A backend put or delete failed.

    ``reason`` is the backend-specific payload (status code, SDK error
    message, OS error) and is not interpreted by the pipeline.
    """

    def __init__(
        self,
        message: str,
        version: Optional[str] = None,
        reason: Any = None,
        backend: Optional[str] = None,
    ):
        details = {}
        if version is not None:
            details["version"] = version
        if reason is not None:
            details["reason"] = str(reason)
        if backend is not None:
            details["backend"] = backend
        super().__init__(message, error_code="STORAGE_ERROR", details=details)
        self.version = version
        self.reason = reason
        self.backend = backend
