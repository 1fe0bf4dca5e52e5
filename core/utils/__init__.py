"""Utility helpers shared across core packages."""

from .env import get_env, get_int_env
from .formatting import format_size

__all__ = [
    "format_size",
    "get_env",
    "get_int_env",
]
