"""Configuration exceptions."""

from .base import UploadError


class ConfigurationError(UploadError):
    """Raised when settings or a definition are invalid."""
    pass
