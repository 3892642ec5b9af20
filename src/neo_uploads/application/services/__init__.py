"""Upload pipeline services."""

from .temp_path_generator import (
    TempPathGenerator,
    create_temp_path_generator,
    normalize_extension,
    remove_temp_file,
)
from .source_acquirer import SourceAcquirer, create_source_acquirer, is_remote
from .transform_executor import TransformExecutor, create_transform_executor
from .version_naming import resolve_file_name, storage_key
from .version_runner import VersionRunner, create_version_runner

__all__ = [
    "TempPathGenerator",
    "create_temp_path_generator",
    "normalize_extension",
    "remove_temp_file",
    "SourceAcquirer",
    "create_source_acquirer",
    "is_remote",
    "TransformExecutor",
    "create_transform_executor",
    "resolve_file_name",
    "storage_key",
    "VersionRunner",
    "create_version_runner",
]
