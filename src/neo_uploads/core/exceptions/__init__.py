"""Exceptions module for neo-uploads.

Recoverable errors (UploadError subclasses) are reported in command results.
Fatal errors (UploadAbort subclasses) propagate out of the pipeline.
"""

from .base import UploadError, UploadAbort, create_error_response
from .acquisition import (
    AcquisitionError,
    InvalidFilePathError,
    FetchError,
    RemoteFetchTimeoutError,
)
from .validation import ValidationRejected, InvalidFileError
from .processing import TransformError
from .storage import StorageError
from .configuration import ConfigurationError
from .fatal import MissingExecutableError, VersionTimeoutError

__all__ = [
    # Base
    "UploadError",
    "UploadAbort",
    "create_error_response",

    # Acquisition
    "AcquisitionError",
    "InvalidFilePathError",
    "FetchError",
    "RemoteFetchTimeoutError",

    # Validation
    "ValidationRejected",
    "InvalidFileError",

    # Processing
    "TransformError",

    # Storage
    "StorageError",

    # Configuration
    "ConfigurationError",

    # Fatal
    "MissingExecutableError",
    "VersionTimeoutError",
]
