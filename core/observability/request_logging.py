"""Request logging helpers for HTTP traffic."""
from __future__ import annotations

import logging
import urllib.parse

from fastapi import FastAPI, Request

from core.utils.formatting import format_size

# Paths to skip HTTP request logging (high-frequency probes)
_QUIET_PATHS = ("/health",)
_SENSITIVE_QUERY_KEYS = {
    "access_token",
    "api_key",
    "apikey",
    "password",
    "secret",
    "token",
}
_TOKEN_PREVIEW_LENGTH = 12


def _redact_token(token_value: str) -> str:
    """Return a preview of sensitive tokens while hiding the rest."""

    if not isinstance(token_value, str):
        return "***"

    if len(token_value) <= _TOKEN_PREVIEW_LENGTH:
        return "***"

    preview = token_value[:_TOKEN_PREVIEW_LENGTH]
    return f"{preview}***"


def _format_client_address(client: tuple[str, int] | None) -> str:
    if not client:
        return "unknown"
    host, port = client
    return f"{host}:{port}" if port is not None else host


def format_query(query: str) -> str:
    """Return ``query`` with sensitive parameter values redacted."""

    if not query:
        return "<none>"

    params = urllib.parse.parse_qs(query, keep_blank_values=True)
    if not any(key.lower() in _SENSITIVE_QUERY_KEYS for key in params):
        return query

    redacted_params: dict[str, list[str]] = {}
    for key, values in params.items():
        if key.lower() in _SENSITIVE_QUERY_KEYS:
            redacted_params[key] = [_redact_token(value) for value in values]
        else:
            redacted_params[key] = values

    return urllib.parse.urlencode(redacted_params, doseq=True)


def _format_content_length(raw: str | None) -> str:
    if not raw:
        return "<unknown>"
    try:
        return format_size(int(raw))
    except ValueError:
        return raw


def register_http_request_logging(app: FastAPI, *, logger_name: str = "core.http") -> None:
    """Attach middleware that logs every HTTP request.

    The request body is never read here: uploads are parsed as a stream by the
    route handler and must reach it untouched.
    """

    if getattr(app.state, "_http_request_logging_installed", False):  # pragma: no cover - idempotence
        return

    logger = logging.getLogger(logger_name)

    @app.middleware("http")
    async def _log_request(request: Request, call_next):  # type: ignore[override]
        path = request.url.path

        if path not in _QUIET_PATHS:
            client = request.client
            client_addr = _format_client_address((client.host, client.port) if client else None)
            logger.info("HTTP %s %s from %s", request.method, path, client_addr)
            logger.debug(
                "HTTP %s %s query=%s content_type=%s content_length=%s",
                request.method,
                path,
                format_query(request.url.query),
                request.headers.get("content-type", "<none>"),
                _format_content_length(request.headers.get("content-length")),
            )

        response = await call_next(request)
        return response

    app.state._http_request_logging_installed = True


__all__ = ["format_query", "register_http_request_logging"]
