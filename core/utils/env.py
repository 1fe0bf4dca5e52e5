"""Common environment helpers used across the uploader."""

from __future__ import annotations

import os

from core.exceptions import ConfigurationError

__all__ = ["get_env", "get_int_env"]


def get_env(key: str, default: str | None = None, *, required: bool = False) -> str | None:
    """Return an environment variable and optionally enforce its presence."""

    value = os.getenv(key, default)
    if required and value is None:
        raise ConfigurationError(f"Required environment variable {key} not set", key=key)
    return value


def get_int_env(key: str, default: int) -> int:
    """Return a non-negative integer environment variable, or ``default`` when unset."""

    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", key=key) from exc
    if value < 0:
        raise ConfigurationError(f"{key} must not be negative", key=key)
    return value
