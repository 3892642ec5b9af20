"""Configuration for neo-uploads.

Settings are resolved once from the environment and passed explicitly to the
pipeline components.
"""

from .settings import UploadSettings, get_settings, load_settings
from .logging_config import (
    LoggingConfig,
    LogLevel,
    LogVerbosity,
    LogFormat,
    setup_logging,
    get_logger,
)

__all__ = [
    "UploadSettings",
    "get_settings",
    "load_settings",
    "LoggingConfig",
    "LogLevel",
    "LogVerbosity",
    "LogFormat",
    "setup_logging",
    "get_logger",
]
