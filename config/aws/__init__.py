"""Object storage (S3-compatible) configuration values."""

from __future__ import annotations

from typing import Dict

from config.environment import ENVIRONMENT

_ENVIRONMENT_DEFAULTS: Dict[str, Dict[str, str]] = {
    "production": {
        "storage_bucket": "default-bucket",
        "storage_region": "us-east-1",
    },
    "development": {
        "storage_bucket": "default-bucket",
        "storage_region": "us-east-1",
    },
    "test": {
        "storage_bucket": "test-bucket",
        "storage_region": "us-east-1",
    },
}

_defaults = _ENVIRONMENT_DEFAULTS.get(ENVIRONMENT, _ENVIRONMENT_DEFAULTS["development"])

DEFAULT_STORAGE_BUCKET = _defaults["storage_bucket"]
DEFAULT_STORAGE_REGION = _defaults["storage_region"]
# 100 MiB
DEFAULT_STORAGE_MAX_SIZE = 100 * 1024 * 1024

# Boto client behaviour; these are the only network timeouts applied to uploads
# and deletions.
S3_CONNECT_TIMEOUT = 10
S3_READ_TIMEOUT = 60
S3_MAX_ATTEMPTS = 3

# SigV4 presigned URLs cannot outlive seven days.
PRESIGN_MAX_EXPIRY_SECONDS = 7 * 24 * 3600

__all__ = [
    "DEFAULT_STORAGE_BUCKET",
    "DEFAULT_STORAGE_MAX_SIZE",
    "DEFAULT_STORAGE_REGION",
    "PRESIGN_MAX_EXPIRY_SECONDS",
    "S3_CONNECT_TIMEOUT",
    "S3_MAX_ATTEMPTS",
    "S3_READ_TIMEOUT",
]
