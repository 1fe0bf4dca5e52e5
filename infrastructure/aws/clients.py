"""Build the boto3 S3 client used by the storage gateway."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config as BotoConfig

from config.aws import S3_CONNECT_TIMEOUT, S3_MAX_ATTEMPTS, S3_READ_TIMEOUT
from core.config import Settings

logger = logging.getLogger(__name__)


def _build_boto_config(settings: Settings) -> BotoConfig:
    s3_options: dict[str, Any] = {}
    if settings.endpoint_url:
        # S3-compatible services (MinIO, R2, Ceph...) expect path-style URLs
        s3_options["addressing_style"] = "path"

    return BotoConfig(
        region_name=settings.region,
        signature_version="s3v4",
        retries={"max_attempts": S3_MAX_ATTEMPTS, "mode": "standard"},
        connect_timeout=S3_CONNECT_TIMEOUT,
        read_timeout=S3_READ_TIMEOUT,
        s3=s3_options or None,
    )


def create_s3_client(settings: Settings) -> Any:
    """Return a boto3 S3 client using the static credentials in ``settings``.

    boto3 clients are thread-safe, so a single instance is shared by every
    upload and every scheduled deletion.
    """

    logger.info(
        "Creating S3 client for bucket %s (region=%s, endpoint=%s)",
        settings.bucket,
        settings.region,
        settings.endpoint_url or "<aws>",
    )
    return boto3.client(
        "s3",
        aws_access_key_id=settings.access_key or None,
        aws_secret_access_key=settings.secret_key or None,
        endpoint_url=settings.endpoint_url,
        config=_build_boto_config(settings),
    )


__all__ = ["create_s3_client"]
