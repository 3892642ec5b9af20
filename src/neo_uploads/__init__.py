"""Neo-Uploads - versioned file upload pipeline for NeoMultiTenant services.

Acquires a file (local path, upload, in-memory bytes or remote URL), derives
every declared version with external programs or custom functions, and
persists all versions to a pluggable storage backend (local disk, S3, Azure
Blob Storage), all or nothing.

    from neo_uploads import Definition, Uploader, convert, NO_ACTION

    class AvatarDefinition(Definition):
        versions = ("original", "thumb")

        def transform(self, version, artifact, scope):
            if version == "thumb":
                return convert("-thumbnail 100x100", "png")
            return NO_ACTION

    result = await Uploader(AvatarDefinition()).store("selfie.png")
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    UploadSettings,
    get_settings,
    load_settings,
    LoggingConfig,
    get_logger,
)

from .core.entities import (
    Artifact,
    StoredFile,
    LocalUpload,
    BinaryUpload,
    RemoteUpload,
)

from .core.value_objects import (
    PipelineStage,
    NoAction,
    Skip,
    Command,
    CustomFunction,
    NO_ACTION,
    SKIP,
    convert,
    ffmpeg,
)

from .core.protocols import StorageBackend

from .core.exceptions import (
    # Base
    UploadError,
    UploadAbort,
    create_error_response,

    # Recoverable
    AcquisitionError,
    InvalidFilePathError,
    FetchError,
    RemoteFetchTimeoutError,
    ValidationRejected,
    InvalidFileError,
    TransformError,
    StorageError,
    ConfigurationError,

    # Fatal
    MissingExecutableError,
    VersionTimeoutError,
)

from .application import (
    Definition,
    Uploader,
    create_uploader,
    StoreFileCommand,
    StoreFileData,
    StoreFileResult,
    DeleteFileCommand,
    DeleteFileData,
    DeleteFileResult,
    UrlResolver,
    get_file_data,
    MimeTypeValidator,
    resolve_file_name,
)

__all__ = [
    "__version__",

    # Configuration
    "UploadSettings",
    "get_settings",
    "load_settings",
    "LoggingConfig",
    "get_logger",

    # Entities
    "Artifact",
    "StoredFile",
    "LocalUpload",
    "BinaryUpload",
    "RemoteUpload",

    # Transform instructions
    "PipelineStage",
    "NoAction",
    "Skip",
    "Command",
    "CustomFunction",
    "NO_ACTION",
    "SKIP",
    "convert",
    "ffmpeg",

    # Protocols
    "StorageBackend",

    # Exceptions
    "UploadError",
    "UploadAbort",
    "create_error_response",
    "AcquisitionError",
    "InvalidFilePathError",
    "FetchError",
    "RemoteFetchTimeoutError",
    "ValidationRejected",
    "InvalidFileError",
    "TransformError",
    "StorageError",
    "ConfigurationError",
    "MissingExecutableError",
    "VersionTimeoutError",

    # Application
    "Definition",
    "Uploader",
    "create_uploader",
    "StoreFileCommand",
    "StoreFileData",
    "StoreFileResult",
    "DeleteFileCommand",
    "DeleteFileData",
    "DeleteFileResult",
    "UrlResolver",
    "get_file_data",
    "MimeTypeValidator",
    "resolve_file_name",
]
