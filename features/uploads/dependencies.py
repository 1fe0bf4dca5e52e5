"""Dependency helpers for the uploads feature."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from core.config import Settings, get_settings
from infrastructure.aws.clients import create_s3_client
from infrastructure.aws.storage import ObjectStorageService

from .expiry import ExpiryScheduler, get_expiry_scheduler


@lru_cache(maxsize=4)
def _storage_for(settings: Settings) -> ObjectStorageService:
    return ObjectStorageService(bucket_name=settings.bucket, s3_client=create_s3_client(settings))


def get_storage_service(settings: Settings = Depends(get_settings)) -> ObjectStorageService:
    """Return the shared :class:`ObjectStorageService` for ``settings``."""

    settings.validate()
    return _storage_for(settings)


def get_scheduler() -> ExpiryScheduler:
    return get_expiry_scheduler()


__all__ = ["get_scheduler", "get_settings", "get_storage_service"]
