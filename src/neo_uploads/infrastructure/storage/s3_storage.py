"""Amazon S3 storage backend.

ONLY S3 storage - uploads versions with boto3, builds plain or presigned
URLs and deletes objects.

Credentials and region come from the standard boto3 chain (environment,
shared config, instance role). boto3 calls are blocking and run in worker
threads.

ACLs may be given in either spelling (``"public_read"`` or
``"public-read"``). ``Definition.s3_object_headers`` may use snake_case
(``content_type``, ``cache_control``, ``encryption``) or boto3's own
``ExtraArgs`` keys (``ContentType``).
"""

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import boto3
from boto3.exceptions import Boto3Error
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ...config.settings import UploadSettings, get_settings
from ...core.entities.artifact import Artifact
from ...core.exceptions import StorageError
from ...application.services.version_naming import storage_key

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 60 * 5

BACKEND = "s3"

_HEADER_ALIASES = {
    "encryption": "ServerSideEncryption",
}


class S3Storage:
    """Store versions in S3 buckets chosen by the definition."""

    def __init__(self, client: Any = None, settings: Optional[UploadSettings] = None):
        """Initialize S3 storage.

        Args:
            client: boto3 S3 client, created on first use when omitted
            settings: Upload settings (``virtual_host``)
        """
        self._client = client
        self._settings = settings or get_settings()

    @property
    def client(self) -> Any:
        if self._client is None:
            addressing = "virtual" if self._settings.virtual_host else "auto"
            self._client = boto3.client("s3", config=Config(s3={"addressing_style": addressing}))
        return self._client

    async def put(self, definition, version: str, artifact: Artifact, scope: Any) -> str:
        """Upload ``artifact`` to ``bucket/storage_dir/file_name``."""
        bucket = self._bucket(definition, artifact, scope, version)
        directory = definition.storage_dir(version, artifact, scope) or ""
        key = f"{directory.rstrip('/')}/{artifact.file_name}" if directory else artifact.file_name
        extra_args = object_extra_args(definition.s3_object_headers(version, artifact, scope))
        extra_args["ACL"] = normalize_acl(definition.acl(version, artifact, scope))

        try:
            if artifact.binary is not None:
                await asyncio.to_thread(
                    self.client.put_object,
                    Bucket=bucket,
                    Key=key,
                    Body=artifact.binary,
                    **extra_args,
                )
            else:
                await asyncio.to_thread(
                    self.client.upload_file,
                    artifact.path,
                    bucket,
                    key,
                    ExtraArgs=extra_args,
                )
        except (ClientError, BotoCoreError, Boto3Error) as e:
            logger.error(f"S3 upload of {key} to {bucket} ({version}) failed: {e}")
            raise StorageError(
                f"could not upload {key} to bucket {bucket}",
                version=version,
                reason=e,
                backend=BACKEND,
            ) from e

        logger.debug(f"Uploaded {version} to s3://{bucket}/{key}")
        return artifact.file_name

    def url(
        self,
        definition,
        version: str,
        artifact: Any,
        scope: Any,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Plain URL, or a presigned GET URL when ``signed`` is set."""
        options = options or {}
        key = storage_key(definition, version, artifact, scope)

        if options.get("signed"):
            expires_in = options.get("expires_in") or options.get("expire_in") or DEFAULT_EXPIRES_IN
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket(definition, artifact, scope, version), "Key": key},
                ExpiresIn=int(expires_in),
            )

        host = definition.asset_host() or self._default_host(definition, artifact, scope, version)
        return f"{host.rstrip('/')}/{quote(key.lstrip('/'), safe='/~')}"

    async def delete(self, definition, version: str, artifact: Any, scope: Any) -> None:
        """Delete the object of ``version``."""
        bucket = self._bucket(definition, artifact, scope, version)
        key = storage_key(definition, version, artifact, scope)
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError, Boto3Error) as e:
            logger.error(f"S3 delete of {key} from {bucket} ({version}) failed: {e}")
            raise StorageError(
                f"could not delete {key} from bucket {bucket}",
                version=version,
                reason=e,
                backend=BACKEND,
            ) from e

    def _default_host(self, definition, artifact: Any, scope: Any, version: str) -> str:
        bucket = self._bucket(definition, artifact, scope, version)
        if self._settings.virtual_host:
            return f"https://{bucket}.s3.amazonaws.com"
        return f"https://s3.amazonaws.com/{bucket}"

    @staticmethod
    def _bucket(definition, artifact: Any, scope: Any, version: str) -> str:
        bucket = definition.bucket(artifact, scope)
        if not bucket:
            raise StorageError(
                "no S3 bucket configured",
                version=version,
                reason="invalid_bucket",
                backend=BACKEND,
            )
        return bucket


def normalize_acl(acl: Any) -> str:
    """``public_read`` -> ``public-read``."""
    return str(acl).replace("_", "-")


def object_extra_args(headers: Any) -> Dict[str, Any]:
    """Convert definition object headers to boto3 ``ExtraArgs``."""
    items = headers.items() if isinstance(headers, dict) else (headers or [])
    extra_args = {}
    for name, value in items:
        name = str(name)
        if name in _HEADER_ALIASES:
            name = _HEADER_ALIASES[name]
        elif "_" in name or name.islower():
            name = "".join(part.capitalize() for part in name.split("_"))
        extra_args[name] = value
    return extra_args


def create_s3_storage(client: Any = None, settings: Optional[UploadSettings] = None) -> S3Storage:
    """Create S3 storage backend."""
    return S3Storage(client=client, settings=settings)
