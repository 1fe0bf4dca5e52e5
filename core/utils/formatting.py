"""Human readable formatting helpers used in log lines and error messages."""

from __future__ import annotations

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_size(num_bytes: int) -> str:
    """Return ``num_bytes`` using binary (1024) units, e.g. ``1.50 MB``."""

    if num_bytes <= 0:
        return "0 B"

    value = float(num_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {_SIZE_UNITS[unit_index]}"


__all__ = ["format_size"]
