"""Upload commands (store and delete)."""

from .store_file import (
    StoreFileCommand,
    StoreFileData,
    StoreFileResult,
    create_store_file_command,
)
from .delete_file import (
    DeleteFileCommand,
    DeleteFileData,
    DeleteFileResult,
    create_delete_file_command,
)

__all__ = [
    "StoreFileCommand",
    "StoreFileData",
    "StoreFileResult",
    "create_store_file_command",
    "DeleteFileCommand",
    "DeleteFileData",
    "DeleteFileResult",
    "create_delete_file_command",
]
