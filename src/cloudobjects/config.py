"""Client configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict

from cloudobjects.core.types import CacheProvider


class CloudObjectsSettings(BaseSettings):
    """Client configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CLOUDOBJECTS_",
    )

    # Object API
    api_base_url: str = Field(
        default="https://api.cloudobjects.io/",
        description="Base URL of the CloudObjects object API",
    )
    auth_ns: str | None = Field(
        default=None,
        description="Hostname of the namespace the client authenticates as",
    )
    auth_secret: str | None = Field(
        default=None,
        description="Shared secret of the authenticating namespace",
    )
    timeout: float = Field(
        default=20.0,
        gt=0,
        description="Request timeout in seconds",
    )
    connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Connect timeout in seconds",
    )

    # Cache
    cache_provider: CacheProvider = Field(
        default=CacheProvider.NONE,
        description="Backend for the external cache tier",
    )
    cache_prefix: str = Field(
        default="clobj:",
        description="Prefix for keys in the external cache",
    )
    redis_url: RedisDsn | None = Field(
        default=None,
        description="Redis connection URL (cache_provider=redis)",
    )
    cache_directory: Path | None = Field(
        default=None,
        description="Directory for cache files (cache_provider=file), system temp dir if unset",
    )
    cache_ttl: int = Field(
        default=60,
        description="TTL for cached object descriptions in seconds",
    )
    cache_ttl_attachments: int = Field(
        default=0,
        description="TTL for cached attachments in seconds, 0 for no expiry",
    )
    static_config_path: Path | None = Field(
        default=None,
        description="Root directory of pre-baked object descriptions",
    )

    # App settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_settings() -> CloudObjectsSettings:
    """Get cached settings instance."""
    return CloudObjectsSettings()
