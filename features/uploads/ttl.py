"""Convert a TTL magnitude and unit token into seconds."""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)

# Largest value an unsigned 64-bit counter can hold; TTLs saturate here.
MAX_TTL_SECONDS = 2**64 - 1


class TtlUnit(str, Enum):
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def seconds(self) -> int:
        return 60 if self is TtlUnit.MINUTES else 3600

    @classmethod
    def parse(cls, token: "str | TtlUnit | None") -> "TtlUnit":
        """Return the unit for ``token``; anything unrecognised means hours."""

        if isinstance(token, TtlUnit):
            return token
        normalised = (token or "").strip().lower()
        for unit in cls:
            if unit.value == normalised:
                return unit
        logger.warning("Unrecognised TTL unit %r, using hours", token)
        return cls.HOURS


def resolve_ttl(magnitude: int, unit: "str | TtlUnit | None") -> int:
    """Return ``magnitude`` scaled by ``unit``, saturating at :data:`MAX_TTL_SECONDS`."""

    if magnitude <= 0:
        return 0
    return min(magnitude * TtlUnit.parse(unit).seconds, MAX_TTL_SECONDS)


__all__ = ["MAX_TTL_SECONDS", "TtlUnit", "resolve_ttl"]
