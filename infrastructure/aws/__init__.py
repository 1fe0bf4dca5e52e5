"""AWS infrastructure helpers (S3 client and storage gateway)."""

from .clients import create_s3_client
from .storage import ObjectStorageService, StoredObject, resolve_content_type

__all__ = [
    "create_s3_client",
    "ObjectStorageService",
    "StoredObject",
    "resolve_content_type",
]
