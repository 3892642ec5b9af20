"""HTTP infrastructure."""

from .remote_file_fetcher import (
    RemoteFileFetcher,
    FetchedFile,
    filename_from_content_disposition,
    create_remote_file_fetcher,
)

__all__ = [
    "RemoteFileFetcher",
    "FetchedFile",
    "filename_from_content_disposition",
    "create_remote_file_fetcher",
]
