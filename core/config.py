"""Settings dataclass assembled from the environment.

Defaults live in the ``config/`` package:
- Object storage: config.aws
- Upload pipeline: config.uploads
- Environment detection: config.environment

``Settings.from_env`` reads the environment at call time so the process (and
tests) can build fresh settings; ``get_settings`` caches the process-wide
instance used by request dependencies. Credentials are validated once at
startup through :meth:`Settings.validate`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from config.aws import DEFAULT_STORAGE_BUCKET, DEFAULT_STORAGE_MAX_SIZE, DEFAULT_STORAGE_REGION
from config.environment import ENVIRONMENT
from config.uploads import (
    DEFAULT_LINK_EXPIRY_SECONDS,
    DEFAULT_MAX_BODY_SIZE,
    DEFAULT_MAX_FIELD_SIZE,
    DEFAULT_PORT,
    DEFAULT_TEMP_DIR,
)
from core.exceptions import ConfigurationError
from core.utils.env import get_env, get_int_env


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings shared by every request."""

    bucket: str = DEFAULT_STORAGE_BUCKET
    region: str = DEFAULT_STORAGE_REGION
    access_key: str = field(default="", repr=False)
    secret_key: str = field(default="", repr=False)
    endpoint_url: Optional[str] = None
    max_size: int = DEFAULT_STORAGE_MAX_SIZE
    upload_password: str = field(default="", repr=False)
    temp_dir: Path = DEFAULT_TEMP_DIR
    max_body_size: int = DEFAULT_MAX_BODY_SIZE
    max_field_size: int = DEFAULT_MAX_FIELD_SIZE
    default_link_expiry: int = DEFAULT_LINK_EXPIRY_SECONDS
    port: int = DEFAULT_PORT
    environment: str = ENVIRONMENT

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``STORAGE_*``, ``UPLOAD_*`` and ``PASSWORD`` variables."""

        temp_dir = get_env("UPLOAD_TEMP_DIR")
        return cls(
            bucket=get_env("STORAGE_BUCKET") or DEFAULT_STORAGE_BUCKET,
            region=get_env("STORAGE_REGION") or DEFAULT_STORAGE_REGION,
            access_key=get_env("STORAGE_ACCESS_KEY", default="") or "",
            secret_key=get_env("STORAGE_SECRET_KEY", default="") or "",
            endpoint_url=get_env("STORAGE_URL") or None,
            max_size=get_int_env("STORAGE_MAX_SIZE", DEFAULT_STORAGE_MAX_SIZE),
            upload_password=get_env("PASSWORD", default="") or "",
            temp_dir=Path(temp_dir).expanduser() if temp_dir else DEFAULT_TEMP_DIR,
            max_body_size=get_int_env("UPLOAD_MAX_BODY_SIZE", DEFAULT_MAX_BODY_SIZE),
            max_field_size=get_int_env("UPLOAD_MAX_FIELD_SIZE", DEFAULT_MAX_FIELD_SIZE),
            default_link_expiry=get_int_env(
                "UPLOAD_DEFAULT_LINK_EXPIRY", DEFAULT_LINK_EXPIRY_SECONDS
            ),
            port=get_int_env("PORT", DEFAULT_PORT),
        )

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` when storage credentials are missing."""

        if not self.access_key or not self.secret_key:
            raise ConfigurationError(
                "Access key and secret key must be provided via STORAGE_ACCESS_KEY "
                "and STORAGE_SECRET_KEY",
                key="STORAGE_ACCESS_KEY" if not self.access_key else "STORAGE_SECRET_KEY",
            )
        if not self.bucket:
            raise ConfigurationError("STORAGE_BUCKET must be configured", key="STORAGE_BUCKET")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached process-wide settings."""

    return Settings.from_env()


__all__ = ["Settings", "get_settings"]
