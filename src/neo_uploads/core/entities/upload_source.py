"""Upload source entities.

ONLY caller input shapes - the variants a caller may hand to ``store``
besides a plain local path or http(s) URL string.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocalUpload:
    """A file already on disk with its own display name (e.g. a form upload)."""

    filename: str
    path: str


@dataclass(frozen=True)
class BinaryUpload:
    """An in-memory blob."""

    filename: str
    binary: bytes

    def __repr__(self) -> str:
        return f"BinaryUpload(filename={self.filename!r}, size={len(self.binary)})"


@dataclass(frozen=True)
class RemoteUpload:
    """A remote file fetched over http(s) and stored under ``filename``."""

    filename: str
    remote_url: str
