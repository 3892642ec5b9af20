"""Storage backends."""

from .local_storage import LocalStorage, create_local_storage
from .s3_storage import S3Storage, create_s3_storage
from .azure_storage import AzureStorage, create_azure_storage

__all__ = [
    "LocalStorage",
    "create_local_storage",
    "S3Storage",
    "create_s3_storage",
    "AzureStorage",
    "create_azure_storage",
]
