"""Upload pipeline protocols."""

from .storage_backend import StorageBackend

__all__ = [
    "StorageBackend",
]
