"""Upload pipeline entities."""

from .artifact import Artifact, StoredFile
from .upload_source import LocalUpload, BinaryUpload, RemoteUpload

__all__ = [
    "Artifact",
    "StoredFile",
    "LocalUpload",
    "BinaryUpload",
    "RemoteUpload",
]
