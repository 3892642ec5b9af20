"""Upload definition.

ONLY definition surface - the per-uploader configuration the pipeline
consumes: declared versions, transform instructions, naming rules,
validation, storage selection and backend placement options.

Subclass and override what differs from the defaults::

    class AvatarDefinition(Definition):
        versions = ("original", "thumb")

        def transform(self, version, artifact, scope):
            if version == "thumb":
                return convert("-strip -thumbnail 100x100^ -gravity center -extent 100x100", "png")
            return NO_ACTION

        def storage_dir(self, version, artifact, scope):
            return f"uploads/users/avatars/{scope.id}"

The definition instance is passed explicitly to the store, delete and URL
operations; nothing is looked up from global state.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from yarl import URL

from ..config.settings import UploadSettings, get_settings
from ..core.protocols.storage_backend import StorageBackend
from ..core.value_objects.transform import (
    NO_ACTION,
    TransformInstruction,
    coerce_instruction,
)

logger = logging.getLogger(__name__)


class Definition:
    """Base upload definition with overridable defaults."""

    #: Declared versions, in order; the first is the default for URLs
    versions: Sequence[str] = ("original",)

    #: Process and persist versions as concurrent tasks
    concurrent: bool = True

    #: Default access control for S3 uploads
    default_acl: str = "private"

    def __init__(
        self,
        settings: Optional[UploadSettings] = None,
        storage: Optional[StorageBackend] = None,
    ):
        self.settings = settings or get_settings()
        self._storage = storage
        if not self.versions:
            raise ValueError(f"{type(self).__name__} declares no versions")

    # Storage selection

    @property
    def storage(self) -> StorageBackend:
        """Storage backend used for every version of this definition."""
        if self._storage is None:
            self._storage = self.default_storage()
        return self._storage

    def default_storage(self) -> StorageBackend:
        """Backend used when none was injected (S3)."""
        from ..infrastructure.storage.s3_storage import S3Storage
        return S3Storage(settings=self.settings)

    # Transformation

    def transform(self, version: str, artifact: Any, scope: Any) -> Any:
        """Return the transform instruction for ``version``.

        Must be deterministic for a given (version, artifact, scope): it is
        evaluated again when stored file names are resolved.
        """
        return NO_ACTION

    def instruction(self, version: str, artifact: Any, scope: Any) -> TransformInstruction:
        """``transform`` normalized to a TransformInstruction."""
        return coerce_instruction(self.transform(version, artifact, scope))

    # Naming and placement

    def filename(self, version: str, artifact: Any, scope: Any) -> str:
        """Destination name without extension (defaults to the source stem)."""
        return artifact.stem

    def storage_dir(self, version: str, artifact: Any, scope: Any) -> str:
        return self.settings.storage_dir

    def storage_dir_prefix(self) -> str:
        return self.settings.storage_dir_prefix

    def asset_host(self) -> Optional[str]:
        return self.settings.asset_host

    # Validation

    def validate(self, artifact: Any, scope: Any) -> Any:
        """Accept or reject an acquired file.

        Return True or "ok" to accept, raise or return ValidationRejected
        (or return an ``("error", message)`` tuple) to reject with a message.
        Anything else rejects with a generic invalid-file error.
        """
        return True

    # URLs

    def default_url(self, version: str, scope: Any) -> Optional[str]:
        """URL returned when there is no stored file (e.g. a placeholder)."""
        return None

    # Remote fetch

    def remote_file_headers(self, url: URL) -> Dict[str, str]:
        """Request headers for fetching a remote source from ``url``."""
        return {}

    # S3 options

    def acl(self, version: str, artifact: Any, scope: Any) -> str:
        return self.default_acl

    def s3_object_headers(self, version: str, artifact: Any, scope: Any) -> Dict[str, Any]:
        """Extra boto3 ``ExtraArgs`` (e.g. ``{"ContentType": "image/png"}``)."""
        return {}

    def bucket(self, artifact: Any = None, scope: Any = None) -> Optional[str]:
        return self.settings.bucket

    # Azure options

    def azure_blob_headers(self, version: str, artifact: Any, scope: Any) -> Dict[str, str]:
        """Extra blob headers (e.g. ``{"content_type": "image/png"}``)."""
        return {}

    def storage_account(self, artifact: Any = None, scope: Any = None) -> Optional[str]:
        return self.settings.azure_storage_account

    def container(self, artifact: Any = None, scope: Any = None) -> Optional[str]:
        return self.settings.azure_container

    def access_key(self, artifact: Any = None, scope: Any = None) -> Optional[str]:
        key = self.settings.azure_access_key
        return key.get_secret_value() if key is not None else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(versions={list(self.versions)!r})"
