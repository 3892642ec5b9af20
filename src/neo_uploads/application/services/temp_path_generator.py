"""Temporary path generator.

ONLY temp paths - collision-resistant paths for every file the pipeline
creates. Callers never build temp paths themselves.
"""

import base64
import logging
import os
import secrets
import tempfile
from typing import Any, Optional

logger = logging.getLogger(__name__)

# 20 random bytes -> 32 base32 characters, no padding
RANDOM_BYTES = 20


def normalize_extension(extension: Optional[Any]) -> str:
    """Return ``extension`` with a leading dot, or an empty string."""
    ext = "" if extension is None else str(extension)
    if not ext:
        return ""
    if ext.startswith("."):
        return ext
    return f".{ext}"


class TempPathGenerator:
    """Generates unique paths inside the configured temp directory."""

    def __init__(self, tmp_dir: Optional[str] = None):
        self._tmp_dir = tmp_dir

    @property
    def directory(self) -> str:
        return self._tmp_dir or tempfile.gettempdir()

    def generate(self, extension: Optional[Any] = None) -> str:
        """Generate a new temp path.

        Args:
            extension: Optional extension, with or without the leading dot

        Returns:
            Absolute path that does not exist yet
        """
        token = base64.b32encode(secrets.token_bytes(RANDOM_BYTES)).decode("ascii")
        path = os.path.join(self.directory, token + normalize_extension(extension))
        logger.debug(f"Generated temp path {path}")
        return path


def remove_temp_file(path: Optional[str]) -> bool:
    """Delete a pipeline temp file if it still exists.

    Returns:
        True if a file was removed
    """
    if not path:
        return False
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False


def create_temp_path_generator(tmp_dir: Optional[str] = None) -> TempPathGenerator:
    """Create temp path generator."""
    return TempPathGenerator(tmp_dir)
