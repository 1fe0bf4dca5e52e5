"""Upload pipeline configuration."""

from __future__ import annotations

from .defaults import (
    DEFAULT_LINK_EXPIRY_SECONDS,
    DEFAULT_MAX_BODY_SIZE,
    DEFAULT_MAX_FIELD_SIZE,
    DEFAULT_PORT,
    DEFAULT_TEMP_DIR,
    DEFAULT_TTL_UNIT,
    DEFAULT_TTL_VALUE,
    FILE_FIELD,
    IDENTIFIER_FIELD,
    PASSWORD_FIELD,
    PLACEHOLDER_FILENAME,
    TTL_UNIT_FIELD,
    TTL_VALUE_FIELD,
)

__all__ = [
    "DEFAULT_LINK_EXPIRY_SECONDS",
    "DEFAULT_MAX_BODY_SIZE",
    "DEFAULT_MAX_FIELD_SIZE",
    "DEFAULT_PORT",
    "DEFAULT_TEMP_DIR",
    "DEFAULT_TTL_UNIT",
    "DEFAULT_TTL_VALUE",
    "FILE_FIELD",
    "IDENTIFIER_FIELD",
    "PASSWORD_FIELD",
    "PLACEHOLDER_FILENAME",
    "TTL_UNIT_FIELD",
    "TTL_VALUE_FIELD",
]
