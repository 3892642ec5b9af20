"""
Upload pipeline settings.

Environment-level configuration consumed by the upload pipeline: temp
directory, version timeout, remote fetch timeouts and retry policy, and the
defaults the storage backends fall back to when a definition does not
override them.
"""
import tempfile
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError


class UploadSettings(BaseSettings):
    """Settings for the version pipeline and storage backends.

    All durations are in milliseconds unless the field name says otherwise.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEO_UPLOADS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Temporary files
    tmp_dir: Optional[str] = Field(default=None, description="Directory for pipeline temp files")

    # Version processing
    version_timeout: int = Field(default=15_000, gt=0, description="Per-version task timeout (ms)")

    # Remote fetch
    connect_timeout: int = Field(default=10_000, gt=0, description="HTTP connect timeout (ms)")
    recv_timeout: int = Field(default=5_000, gt=0, description="HTTP receive timeout (ms)")
    max_retries: int = Field(default=3, ge=1, description="Total attempts for a timing-out fetch")
    backoff_factor: int = Field(default=1_000, ge=0, description="Backoff base delay (ms)")
    backoff_max: int = Field(default=30_000, ge=0, description="Backoff delay ceiling (ms)")

    # Storage layout
    storage_dir: str = Field(default="uploads", description="Default storage directory")
    storage_dir_prefix: str = Field(default="", description="Local prefix not exposed in URLs")
    asset_host: Optional[str] = Field(default=None, description="Host prepended to generated URLs")

    # S3
    bucket: Optional[str] = Field(default=None, description="Default S3 bucket")
    virtual_host: bool = Field(default=False, description="Use virtual-hosted S3 URLs")

    # Azure Blob Storage
    azure_storage_account: Optional[str] = Field(default=None, description="Azure storage account")
    azure_container: Optional[str] = Field(default=None, description="Azure blob container")
    azure_access_key: Optional[SecretStr] = Field(default=None, description="Azure shared key (base64)")

    @field_validator("tmp_dir")
    @classmethod
    def validate_tmp_dir(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty override as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("asset_host")
    @classmethod
    def validate_asset_host(cls, v: Optional[str]) -> Optional[str]:
        """Strip the trailing slash so URL joins stay predictable."""
        if v:
            return v.rstrip("/")
        return v

    @property
    def temp_directory(self) -> str:
        """Resolved temp directory (system default when not overridden)."""
        return self.tmp_dir or tempfile.gettempdir()

    @property
    def connect_timeout_seconds(self) -> float:
        return self.connect_timeout / 1000

    @property
    def recv_timeout_seconds(self) -> float:
        return self.recv_timeout / 1000

    def backoff_delay_seconds(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based).

        ``min(backoff_factor * 2 ** (attempt - 1), backoff_max)`` in seconds.
        """
        delay_ms = min(self.backoff_factor * 2 ** (attempt - 1), self.backoff_max)
        return delay_ms / 1000


@lru_cache()
def get_settings() -> UploadSettings:
    """Get cached upload settings instance."""
    return UploadSettings()


def load_settings(**overrides) -> UploadSettings:
    """Build settings from the environment plus explicit overrides.

    Raises:
        ConfigurationError: If any value fails validation
    """
    try:
        return UploadSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid upload settings",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e
