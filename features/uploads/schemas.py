"""Data carried through the upload pipeline and the JSON response schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from config.uploads import DEFAULT_TTL_UNIT, DEFAULT_TTL_VALUE
from services.temporary_storage import StagedFile


@dataclass(slots=True)
class Submission:
    """Raw values collected while a multipart request is streamed.

    TTL fields stay raw (magnitude and unit token) and are resolved exactly once
    after parsing finishes.
    """

    files: List[StagedFile] = field(default_factory=list)
    identifier: str = ""
    ttl_value: int = DEFAULT_TTL_VALUE
    ttl_unit: str = DEFAULT_TTL_UNIT
    password: str = field(default="", repr=False)


@dataclass(slots=True)
class PublishedObject:
    key: str
    retrieval_url: str
    ttl_seconds: int


@dataclass(slots=True)
class UploadFailure:
    filename: str
    error: str


PublishOutcome = Union[PublishedObject, UploadFailure]


class UploadResultItem(BaseModel):
    """One file's outcome as returned to JSON clients."""

    status: Literal["published", "failed"]
    filename: str = Field(..., description="Object key on success, client filename on failure")
    url: Optional[str] = Field(None, description="Presigned retrieval link")
    ttl_seconds: Optional[int] = Field(None, description="Seconds until the object is deleted; 0 keeps it")
    error: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: PublishOutcome) -> "UploadResultItem":
        if isinstance(outcome, PublishedObject):
            return cls(
                status="published",
                filename=outcome.key,
                url=outcome.retrieval_url,
                ttl_seconds=outcome.ttl_seconds,
            )
        return cls(status="failed", filename=outcome.filename, error=outcome.error)


__all__ = [
    "PublishOutcome",
    "PublishedObject",
    "Submission",
    "UploadFailure",
    "UploadResultItem",
]
