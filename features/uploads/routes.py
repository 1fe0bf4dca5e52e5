"""HTTP endpoints for the upload form and the TTL-bound publish flow."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response

from core.config import Settings, get_settings
from core.exceptions import (
    AuthenticationError,
    ServiceError,
    StagingError,
    SubmissionParseError,
    ValidationError,
)
from core.pydantic_schemas import error as api_error, ok as api_ok
from infrastructure.aws.storage import ObjectStorageService
from services.temporary_storage import StagingArea

from .dependencies import get_scheduler, get_storage_service
from .expiry import ExpiryScheduler
from .multipart_parser import parse_submission
from .orchestrator import publish_submission
from .rendering import UPLOAD_FORM_HTML, render_message, render_outcomes
from .schemas import PublishedObject, PublishOutcome, UploadResultItem
from .ttl import resolve_ttl
from .validation import validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


def _wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "").lower()


def _error_response(request: Request, status_code: int, message: str, data: Dict[str, Any] | None = None) -> Response:
    if _wants_json(request):
        return JSONResponse(status_code=status_code, content=api_error(status_code, message, data=data))
    return HTMLResponse(render_message(message), status_code=status_code)


def _outcomes_response(request: Request, outcomes: List[PublishOutcome], ttl_seconds: int) -> Response:
    if not _wants_json(request):
        return HTMLResponse(render_outcomes(outcomes))

    items = [UploadResultItem.from_outcome(outcome) for outcome in outcomes]
    published = sum(isinstance(outcome, PublishedObject) for outcome in outcomes)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=api_ok(
            "Upload processed",
            data={"files": [item.model_dump() for item in items]},
            meta={
                "published": published,
                "failed": len(outcomes) - published,
                "ttl_seconds": ttl_seconds,
            },
        ),
    )


@router.get("/", response_class=HTMLResponse, summary="Upload form")
async def upload_form() -> HTMLResponse:
    return HTMLResponse(UPLOAD_FORM_HTML)


@router.post("/upload", summary="Publish uploaded files with a time-to-live")
async def upload_files(
    request: Request,
    settings: Settings = Depends(get_settings),
    storage: ObjectStorageService = Depends(get_storage_service),
    scheduler: ExpiryScheduler = Depends(get_scheduler),
) -> Response:
    """Stream the submission to scratch storage, publish each file and schedule its deletion.

    Browsers get an HTML fragment with one paragraph per file; clients sending
    ``Accept: application/json`` get the standard API envelope instead.
    """

    if not settings.upload_password:
        logger.error("Upload secret is not configured (PASSWORD is empty)")
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Server configuration error")

    staging = StagingArea(settings.temp_dir)
    try:
        try:
            submission = await parse_submission(
                request.headers.get("content-type"),
                request.stream(),
                staging,
                max_body_size=settings.max_body_size,
                max_field_size=settings.max_field_size,
            )
        except SubmissionParseError as exc:
            logger.warning("Failed to read upload: %s", exc.message)
            return _error_response(
                request,
                status.HTTP_400_BAD_REQUEST,
                f"Failed to read upload: {exc.message}",
                data={"field": exc.field} if exc.field else None,
            )

        try:
            await validate_submission(
                submission,
                expected_secret=settings.upload_password,
                staging=staging,
            )
        except AuthenticationError:
            return _error_response(request, status.HTTP_401_UNAUTHORIZED, "Unauthorized")
        except ValidationError as exc:
            return _error_response(request, status.HTTP_400_BAD_REQUEST, exc.message)
        except StagingError as exc:
            logger.error("Failed to prepare staged files: %s", exc.message)
            return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

        ttl_seconds = resolve_ttl(submission.ttl_value, submission.ttl_unit)
        logger.info(
            "Publishing %d file(s) with ttl=%ds (%s %s)",
            len(submission.files),
            ttl_seconds,
            submission.ttl_value,
            submission.ttl_unit,
        )
        outcomes = await publish_submission(
            submission.files,
            ttl_seconds,
            storage=storage,
            scheduler=scheduler,
            staging=staging,
            max_size=settings.max_size,
            default_link_expiry=settings.default_link_expiry,
        )
    except ServiceError as exc:  # pragma: no cover - defensive guard
        logger.error("Upload processing failed: %s", exc)
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)
    finally:
        await staging.cleanup()

    return _outcomes_response(request, outcomes, ttl_seconds)


__all__ = ["router"]
