"""Publish staged files to the object store and schedule their expiry.

Files are handled one after another. For each file:

    Staged -> Uploading -> {Published, UploadFailed} -> TempCleaned
    Published -> DeletionScheduled -> Expired   (detached from the request)

A failure only affects its own file; the scratch copy is removed after every
attempt whatever the outcome.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Protocol, Sequence

from core.exceptions import ServiceError, ValidationError
from core.utils.formatting import format_size
from services.temporary_storage import StagedFile, StagingArea

from .expiry import ExpiryScheduler
from .schemas import PublishedObject, PublishOutcome, UploadFailure

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    async def put_file(self, key: str, path: Path, *, content_type: str | None = None) -> None: ...

    async def presign_get(self, key: str, ttl_seconds: int) -> str: ...

    async def delete_object(self, key: str) -> None: ...


def link_expiry_for(ttl_seconds: int, default_link_expiry: int) -> int:
    """Presigned links live as long as the object, or the default when it never expires."""

    return ttl_seconds if ttl_seconds > 0 else default_link_expiry


async def publish_file(
    staged: StagedFile,
    ttl_seconds: int,
    *,
    storage: ObjectStore,
    scheduler: ExpiryScheduler,
    staging: StagingArea,
    max_size: int,
    default_link_expiry: int,
) -> PublishOutcome:
    """Upload one staged file, schedule its deletion and drop the scratch copy."""

    key = staged.name
    logger.info("Publishing %s (%s)", key, format_size(staged.size))
    try:
        if max_size and staged.size > max_size:
            raise ValidationError(
                f"File exceeds max size {format_size(max_size)} "
                f"(file size: {format_size(staged.size)})",
                field="file",
            )
        await storage.put_file(key, staged.path, content_type=staged.content_type)
        # The object now exists, so its deletion is owed even if presigning fails
        scheduler.schedule(key, ttl_seconds, storage.delete_object)
        url = await storage.presign_get(key, link_expiry_for(ttl_seconds, default_link_expiry))
    except (ServiceError, OSError) as exc:
        logger.error("Upload failed for %s: %s", staged.original_name, exc)
        outcome: PublishOutcome = UploadFailure(filename=staged.original_name, error=str(exc))
    else:
        logger.info("Upload completed: %s", key)
        outcome = PublishedObject(key=key, retrieval_url=url, ttl_seconds=ttl_seconds)
    finally:
        await staging.discard(staged)
    return outcome


async def publish_submission(
    files: Sequence[StagedFile],
    ttl_seconds: int,
    *,
    storage: ObjectStore,
    scheduler: ExpiryScheduler,
    staging: StagingArea,
    max_size: int,
    default_link_expiry: int,
) -> List[PublishOutcome]:
    """Publish every file in order and return one outcome per file."""

    outcomes: List[PublishOutcome] = []
    for staged in files:
        outcomes.append(
            await publish_file(
                staged,
                ttl_seconds,
                storage=storage,
                scheduler=scheduler,
                staging=staging,
                max_size=max_size,
                default_link_expiry=default_link_expiry,
            )
        )

    published = sum(isinstance(outcome, PublishedObject) for outcome in outcomes)
    logger.info(
        "Submission processed: %d published, %d failed, ttl=%ds",
        published,
        len(outcomes) - published,
        ttl_seconds,
    )
    return outcomes


__all__ = ["ObjectStore", "link_expiry_for", "publish_file", "publish_submission"]
