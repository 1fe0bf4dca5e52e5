"""S3 TTL Uploader - Main Application Entry Point

FastAPI application factory for the upload service. Files posted through the
HTML form are streamed to scratch storage, published to an S3-compatible
bucket and deleted again once their time-to-live elapses.

Entry Points:
    - /health - Health check endpoint
    - / - Upload form
    - /upload - Multipart submission (HTML fragment or JSON envelope)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from core.observability import register_http_request_logging
from core.pydantic_schemas import error as api_error
from features.uploads import router as uploads_router
from features.uploads.expiry import get_expiry_scheduler

APP_VERSION = "1.0.0"

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events."""
    # Startup
    settings = get_settings()
    settings.validate()
    await asyncio.to_thread(settings.temp_dir.mkdir, parents=True, exist_ok=True)
    logger.info(
        "Uploader ready (bucket=%s, region=%s, endpoint=%s, temp_dir=%s)",
        settings.bucket,
        settings.region,
        settings.endpoint_url or "aws",
        settings.temp_dir,
    )
    if not settings.upload_password:
        logger.warning("PASSWORD is not set; every upload will be rejected")
    yield
    # Shutdown
    logger.info("Application shutting down...")
    await get_expiry_scheduler().shutdown()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Application factory returning a configured FastAPI instance."""

    app = FastAPI(
        title="S3 TTL Uploader",
        description="Upload files to object storage with automatic expiry",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        """Return a structured API envelope for configuration errors."""

        logger.error("Configuration error: %s", exc)
        payload = api_error(
            code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=str(exc),
            data={"key": exc.key} if getattr(exc, "key", None) else None,
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "version": APP_VERSION}

    register_http_request_logging(app)

    app.include_router(uploads_router)

    logger.info("Application created with uploads router")
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
