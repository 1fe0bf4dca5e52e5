"""Custom exception hierarchy for the S3 TTL uploader.

This module defines a typed exception hierarchy that lets each stage of the
upload pipeline fail precisely and lets the HTTP layer pick the right response.

Exception Handling Flow:
    1. Parser, validator or storage gateway raises a typed exception
    2. The upload route (or a FastAPI exception handler, see main.py) catches it
    3. Parse/validation errors become a whole-submission response
    4. Storage errors become a per-file failure entry, never a request failure
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all service layer errors."""


class ValidationError(ServiceError):
    """Raised when a submission fails validation."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class AuthenticationError(ServiceError):
    """Raised when the submitted secret does not match the configured one."""

    def __init__(self, message: str = "Unauthorized"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    """Raised when a requested object cannot be located."""

    def __init__(self, message: str, resource: str | None = None):
        self.message = message
        self.resource = resource
        super().__init__(self.message)


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class StorageError(ServiceError):
    """Raised when the backing object store rejects or fails an operation."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        key: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.operation = operation
        self.key = key
        self.original_error = original_error
        super().__init__(self.message)


class StagingError(ServiceError):
    """Raised when a file cannot be written to or moved within scratch storage."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(self.message)


class SubmissionParseError(ServiceError):
    """Raised when an incoming multipart submission cannot be read."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)
