"""Base exceptions for neo-uploads.

Recoverable pipeline failures inherit from UploadError and carry an error
code and structured details. Fatal conditions inherit from UploadAbort,
which is outside that hierarchy: ``except UploadError`` does not catch them.
"""

from typing import Any, Dict, Optional


class UploadError(Exception):
    """Base exception for all recoverable upload errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class UploadAbort(Exception):
    """Base exception for fatal conditions that abort a whole operation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


def create_error_response(exception: UploadError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-uploads exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
