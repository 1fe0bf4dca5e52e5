"""
Scratch storage for uploads that are on their way to the object store.

Every submission gets its own directory (``<root>/<uuid4 hex>``) and every file
inside it its own numbered sub-directory, so identical client filenames never
collide, neither across concurrent submissions nor within one submission. The
staged file keeps its client-facing name because that name becomes the object
key.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from config.uploads import PLACEHOLDER_FILENAME
from core.exceptions import StagingError
from core.utils.formatting import format_size

logger = logging.getLogger(__name__)


def safe_filename(raw: str | None, placeholder: str = PLACEHOLDER_FILENAME) -> str:
    """Reduce a client supplied name to a bare filename."""

    candidate = (raw or "").replace("\\", "/").split("/")[-1]
    candidate = candidate.replace("\x00", "").strip()
    if candidate in {"", ".", ".."}:
        return placeholder
    return candidate


@dataclass(slots=True)
class StagedFile:
    """A file written to scratch storage during parsing."""

    original_name: str
    path: Path
    content_type: str | None = None
    size: int = 0
    discarded: bool = False

    @property
    def name(self) -> str:
        """Name the object will be published under."""

        return self.path.name


class StagedFileWriter:
    """Sequential chunk writer for one staged file."""

    def __init__(self, staged: StagedFile, handle: BinaryIO) -> None:
        self.staged = staged
        self._handle = handle

    async def write(self, chunk: bytes) -> None:
        if not chunk:
            return
        try:
            await asyncio.to_thread(self._handle.write, chunk)
        except OSError as exc:
            raise StagingError(
                f"Failed to write {self.staged.original_name}: {exc}",
                path=str(self.staged.path),
            ) from exc
        self.staged.size += len(chunk)

    async def close(self) -> None:
        if self._handle.closed:
            return
        try:
            await asyncio.to_thread(self._handle.close)
        except OSError as exc:
            raise StagingError(
                f"Failed to flush {self.staged.original_name}: {exc}",
                path=str(self.staged.path),
            ) from exc


class StagingArea:
    """Per-submission scratch directory."""

    def __init__(self, root: Path, *, token: str | None = None) -> None:
        self.token = token or uuid.uuid4().hex
        self.directory = Path(root) / self.token
        self._counter = 0

    async def open_file(self, filename: str | None, content_type: str | None = None) -> StagedFileWriter:
        """Create an empty staged file named after ``filename`` and return its writer."""

        original_name = filename or ""
        name = safe_filename(filename)
        slot = self.directory / f"{self._counter:04d}"
        self._counter += 1
        path = slot / name

        def _open() -> BinaryIO:
            slot.mkdir(parents=True, exist_ok=True)
            return path.open("wb")

        try:
            handle = await asyncio.to_thread(_open)
        except OSError as exc:
            raise StagingError(f"Failed to create temp file for {name}: {exc}", path=str(path)) from exc

        logger.debug("Staging %s at %s", original_name or name, path)
        staged = StagedFile(original_name=original_name or name, path=path, content_type=content_type)
        return StagedFileWriter(staged, handle)

    async def rename(self, staged: StagedFile, new_name: str) -> None:
        """Rename ``staged`` in place so it publishes under ``new_name``."""

        target = staged.path.with_name(safe_filename(new_name))
        if target == staged.path:
            return
        try:
            await asyncio.to_thread(staged.path.rename, target)
        except OSError as exc:
            raise StagingError(f"Failed to rename file: {exc}", path=str(staged.path)) from exc
        logger.info("Renamed staged file %s -> %s", staged.path.name, target.name)
        staged.path = target

    async def discard(self, staged: StagedFile) -> bool:
        """Delete the staged copy once; errors are logged, never raised."""

        if staged.discarded:
            return False
        staged.discarded = True
        try:
            await asyncio.to_thread(staged.path.unlink, True)
        except OSError as exc:
            logger.error("Failed to delete temp file %s: %s", staged.path, exc)
            return False
        logger.debug("Temp file deleted: %s (%s)", staged.path, format_size(staged.size))
        return True

    async def cleanup(self) -> None:
        """Remove the whole submission directory, including anything left behind."""

        try:
            await asyncio.to_thread(shutil.rmtree, self.directory)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.error("Failed to remove staging directory %s: %s", self.directory, exc)
            return
        logger.debug("Staging directory removed: %s", self.directory)


__all__ = [
    "StagedFile",
    "StagedFileWriter",
    "StagingArea",
    "safe_filename",
]
