"""Observability helpers for request logging."""

from .request_logging import format_query, register_http_request_logging

__all__ = [
    "format_query",
    "register_http_request_logging",
]
