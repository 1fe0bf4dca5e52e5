"""Gateway for the S3-compatible object store that backs published uploads."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from config.aws import PRESIGN_MAX_EXPIRY_SECONDS
from core.exceptions import ConfigurationError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def resolve_content_type(filename: str, provided: str | None = None) -> str:
    """Infer a sensible content type when the client did not supply a usable one."""

    if provided and provided != "application/octet-stream":
        return provided
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or provided or "application/octet-stream"


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Code", ""))
    return ""


@dataclass(slots=True)
class StoredObject:
    """Listing entry describing one object in the bucket."""

    key: str
    size: int
    last_modified: datetime | None


class ObjectStorageService:
    """Put, fetch, list, delete and presign objects in a single bucket.

    Every boto3 call is blocking, so it runs in a worker thread; the shared
    client may be used by many in-flight uploads and deletions at once.
    """

    def __init__(self, *, bucket_name: str, s3_client: Any) -> None:
        if s3_client is None:
            raise ConfigurationError("S3 client not initialised", key="STORAGE_ACCESS_KEY")
        if not bucket_name:
            raise ConfigurationError("STORAGE_BUCKET must be configured", key="STORAGE_BUCKET")

        self._s3_client = s3_client
        self._bucket_name = bucket_name
        logger.debug("ObjectStorageService initialised", extra={"bucket": self._bucket_name})

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def put_file(self, key: str, path: Path, *, content_type: str | None = None) -> None:
        """Stream the file at ``path`` to ``key`` without loading it into memory."""

        resolved_content_type = resolve_content_type(key, content_type)
        logger.info(
            "Uploading to S3 bucket=%s key=%s content_type=%s",
            self._bucket_name,
            key,
            resolved_content_type,
        )
        # upload_file reports service errors as S3UploadFailedError, not ClientError
        try:
            await asyncio.to_thread(
                self._s3_client.upload_file,
                str(path),
                self._bucket_name,
                key,
                ExtraArgs={"ContentType": resolved_content_type},
            )
        except (BotoCoreError, ClientError, S3UploadFailedError) as exc:
            logger.error("S3 upload failed for key=%s: %s", key, exc)
            raise StorageError(
                f"Failed to upload {key}: {exc}",
                operation="put",
                key=key,
                original_error=exc,
            ) from exc

    async def get_stream(self, key: str) -> Any:
        """Return the streaming body for ``key``; the caller must close it."""

        try:
            response = await asyncio.to_thread(
                self._s3_client.get_object, Bucket=self._bucket_name, Key=key
            )
        except (BotoCoreError, ClientError) as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                raise NotFoundError(f"Object {key} not found", resource=key) from exc
            logger.error("S3 get failed for key=%s: %s", key, exc)
            raise StorageError(
                f"Failed to fetch {key}: {exc}",
                operation="get",
                key=key,
                original_error=exc,
            ) from exc
        return response["Body"]

    async def list_objects(self, prefix: str | None = None, limit: int = 100) -> list[StoredObject]:
        """Return up to ``limit`` objects, optionally restricted to ``prefix``."""

        params: dict[str, Any] = {"Bucket": self._bucket_name, "MaxKeys": limit}
        if prefix:
            params["Prefix"] = prefix

        try:
            response = await asyncio.to_thread(self._s3_client.list_objects_v2, **params)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 list failed for prefix=%s: %s", prefix, exc)
            raise StorageError(
                f"Failed to list objects: {exc}",
                operation="list",
                key=prefix,
                original_error=exc,
            ) from exc

        return [
            StoredObject(
                key=item.get("Key", "unknown"),
                size=int(item.get("Size", 0) or 0),
                last_modified=item.get("LastModified"),
            )
            for item in response.get("Contents", []) or []
        ]

    async def delete_object(self, key: str) -> None:
        """Delete ``key`` from the bucket."""

        logger.info("Deleting from S3 bucket=%s key=%s", self._bucket_name, key)
        try:
            await asyncio.to_thread(
                self._s3_client.delete_object, Bucket=self._bucket_name, Key=key
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(
                f"Failed to delete {key}: {exc}",
                operation="delete",
                key=key,
                original_error=exc,
            ) from exc

    async def presign_get(self, key: str, ttl_seconds: int) -> str:
        """Return a GET URL for ``key`` valid for ``ttl_seconds`` (capped at seven days)."""

        expires_in = max(1, min(ttl_seconds, PRESIGN_MAX_EXPIRY_SECONDS))
        try:
            return await asyncio.to_thread(
                self._s3_client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self._bucket_name, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(
                f"Failed to presign {key}: {exc}",
                operation="presign",
                key=key,
                original_error=exc,
            ) from exc


__all__ = ["ObjectStorageService", "StoredObject", "resolve_content_type"]
