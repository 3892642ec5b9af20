"""Validation exceptions raised or returned by definition validators."""

from typing import Any, Optional

from .base import UploadError


class ValidationRejected(UploadError):
    """Caller-supplied validation rejected the file with a message."""

    def __init__(self, reason: Any = "invalid file", file_name: Optional[str] = None):
        message = reason if isinstance(reason, str) else "; ".join(map(str, reason))
        details = {"reason": reason}
        if file_name:
            details["file_name"] = file_name
        super().__init__(message, error_code="VALIDATION_REJECTED", details=details)
        self.reason = reason
        self.file_name = file_name


class InvalidFileError(ValidationRejected):
    """Validation returned something other than an accept or a message."""

    def __init__(self, file_name: Optional[str] = None):
        super().__init__("invalid file", file_name=file_name)
        self.error_code = "INVALID_FILE"
