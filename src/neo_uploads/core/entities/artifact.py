"""Artifact entity.

ONLY artifact - a concrete file instance flowing through the version
pipeline: its bytes on disk (or in memory) plus the logical name used for
naming rules and extension derivation.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Artifact:
    """A file instance at one point in the pipeline.

    ``binary`` is authoritative when present and is materialized to ``path``
    before any external process is handed the artifact. ``is_tempfile``
    marks bytes created by the pipeline that it must delete once done.
    """

    file_name: str
    path: Optional[str] = None
    binary: Optional[bytes] = None
    is_tempfile: bool = False

    @property
    def name_extension(self) -> str:
        """Extension of the display name (used for destination naming)."""
        return os.path.splitext(self.file_name or "")[1]

    @property
    def stem(self) -> str:
        """Display name without directory or extension."""
        return os.path.splitext(os.path.basename(self.file_name or ""))[0]

    def with_file_name(self, file_name: str) -> "Artifact":
        """Return a copy carrying a different display name."""
        return replace(self, file_name=file_name)


@dataclass(frozen=True)
class StoredFile:
    """Reference to a previously stored file, used for delete and URLs."""

    file_name: str

    @property
    def name_extension(self) -> str:
        return os.path.splitext(self.file_name or "")[1]

    @property
    def stem(self) -> str:
        return os.path.splitext(os.path.basename(self.file_name or ""))[0]
