"""Checks a parsed submission must pass before anything is published."""

from __future__ import annotations

import hmac
import logging
from pathlib import PurePath

from core.exceptions import AuthenticationError, ValidationError
from services.temporary_storage import StagingArea

from .schemas import Submission

logger = logging.getLogger(__name__)


def secrets_match(provided: str, expected: str) -> bool:
    """Compare secrets; an empty expected secret never matches."""

    if not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def identifier_filename(identifier: str, original_name: str) -> str:
    """Return ``identifier`` with the extension of ``original_name`` appended, if any."""

    suffix = PurePath(original_name).suffix
    return f"{identifier}{suffix}" if suffix else identifier


async def validate_submission(
    submission: Submission,
    *,
    expected_secret: str,
    staging: StagingArea,
) -> None:
    """Authorise the submission, apply the identifier rename and require a file.

    Raises :class:`AuthenticationError` on a secret mismatch and
    :class:`ValidationError` when no file was uploaded. A failed rename raises
    :class:`core.exceptions.StagingError`.
    """

    if not secrets_match(submission.password, expected_secret):
        logger.warning("Rejected submission with invalid password")
        raise AuthenticationError("Unauthorized")

    identifier = submission.identifier.strip()
    if identifier and len(submission.files) == 1:
        staged = submission.files[0]
        await staging.rename(staged, identifier_filename(identifier, staged.name))
    elif identifier and submission.files:
        logger.info(
            "Identifier %r ignored for a submission with %d files",
            identifier,
            len(submission.files),
        )

    if not submission.files:
        logger.info("Rejected submission without files")
        raise ValidationError("No file uploaded", field="file")

    logger.debug("Submission validated (%d file(s))", len(submission.files))


__all__ = ["identifier_filename", "secrets_match", "validate_submission"]
