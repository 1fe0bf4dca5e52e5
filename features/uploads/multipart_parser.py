"""Streaming parser that turns a multipart upload into a :class:`Submission`.

The request body is consumed chunk by chunk. Each chunk is fed to
``python_multipart``'s callback parser, which records what it saw; the
recorded events are then handled asynchronously before the next chunk is
requested. File bytes therefore go to scratch storage as they arrive and at
most one request chunk is held in memory per file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, List, Optional, Tuple

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import ClientDisconnect

from config.uploads import (
    FILE_FIELD,
    IDENTIFIER_FIELD,
    PASSWORD_FIELD,
    TTL_UNIT_FIELD,
    TTL_VALUE_FIELD,
)
from core.exceptions import StagingError, SubmissionParseError
from core.utils.formatting import format_size
from services.temporary_storage import StagedFileWriter, StagingArea

from .schemas import Submission

logger = logging.getLogger(__name__)

_TEXT_FIELDS = frozenset({IDENTIFIER_FIELD, TTL_VALUE_FIELD, TTL_UNIT_FIELD, PASSWORD_FIELD})

_HEADERS = "headers"
_DATA = "data"
_PART_END = "part_end"


@dataclass
class _PartState:
    name: str
    kind: str
    filename: Optional[str] = None
    writer: Optional[StagedFileWriter] = None
    text: bytearray = field(default_factory=bytearray)


class SubmissionParser:
    """Parse one multipart submission into a :class:`Submission`."""

    def __init__(
        self,
        content_type: str | None,
        stream: AsyncIterator[bytes],
        staging: StagingArea,
        *,
        max_body_size: int,
        max_field_size: int,
    ) -> None:
        self._content_type = content_type or ""
        self._stream = stream
        self._staging = staging
        self._max_body_size = max_body_size
        self._max_field_size = max_field_size

        self._submission = Submission()
        self._events: List[Tuple[str, object]] = []
        self._header_name = b""
        self._header_value = b""
        self._part_headers: List[Tuple[bytes, bytes]] = []
        self._part: Optional[_PartState] = None

    # python_multipart callbacks: record only, never block

    def _on_part_begin(self) -> None:
        self._part_headers = []

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._part_headers.append((self._header_name.lower(), self._header_value))
        self._header_name = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        self._events.append((_HEADERS, dict(self._part_headers)))

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._events.append((_DATA, bytes(data[start:end])))

    def _on_part_end(self) -> None:
        self._events.append((_PART_END, None))

    def _build_parser(self) -> MultipartParser:
        _, params = parse_options_header(self._content_type)
        boundary = params.get(b"boundary")
        if not self._content_type.lower().startswith("multipart/form-data") or not boundary:
            raise SubmissionParseError("Expected multipart/form-data with a boundary")

        callbacks: dict[str, Callable[..., None]] = {
            "on_part_begin": self._on_part_begin,
            "on_part_data": self._on_part_data,
            "on_part_end": self._on_part_end,
            "on_header_field": self._on_header_field,
            "on_header_value": self._on_header_value,
            "on_header_end": self._on_header_end,
            "on_headers_finished": self._on_headers_finished,
        }
        return MultipartParser(boundary, callbacks)

    async def parse(self) -> Submission:
        """Consume the whole stream; on failure nothing half-written is left behind."""

        parser = self._build_parser()
        received = 0
        try:
            async for chunk in self._stream:
                if not chunk:
                    continue
                received += len(chunk)
                if self._max_body_size and received > self._max_body_size:
                    raise SubmissionParseError(
                        f"Request body exceeds {format_size(self._max_body_size)}"
                    )
                parser.write(chunk)
                await self._drain_events()
            parser.finalize()
            await self._drain_events()
            if self._part is not None:
                raise SubmissionParseError(
                    "Unexpected end of multipart body", field=self._part.name
                )
        except SubmissionParseError:
            await self._abort_current_part()
            raise
        except (MultipartParseError, StagingError, ClientDisconnect, OSError) as exc:
            field_name = self._part.name if self._part else None
            await self._abort_current_part()
            logger.error("Failed to read upload (field=%s): %s", field_name, exc)
            raise SubmissionParseError(f"Error reading upload: {exc}", field=field_name) from exc

        logger.info(
            "Parsed submission: %d file(s), %s received",
            len(self._submission.files),
            format_size(received),
        )
        return self._submission

    async def _drain_events(self) -> None:
        events, self._events = self._events, []
        for kind, payload in events:
            if kind == _HEADERS:
                await self._start_part(payload)  # type: ignore[arg-type]
            elif kind == _DATA:
                await self._feed_part(payload)  # type: ignore[arg-type]
            else:
                await self._finish_part()

    async def _start_part(self, headers: dict[bytes, bytes]) -> None:
        disposition = headers.get(b"content-disposition")
        if not disposition:
            raise SubmissionParseError("Missing Content-Disposition header in multipart part")
        _, options = parse_options_header(disposition)
        name = options.get(b"name", b"").decode("utf-8", errors="replace")

        if name == FILE_FIELD:
            raw_filename = options.get(b"filename")
            filename = raw_filename.decode("utf-8", errors="replace") if raw_filename else None
            content_type = headers.get(b"content-type", b"").decode("latin-1") or None
            writer = await self._staging.open_file(filename, content_type)
            self._part = _PartState(name=name, kind="file", filename=filename, writer=writer)
            logger.debug("Receiving file %s", writer.staged.original_name)
        elif name in _TEXT_FIELDS:
            self._part = _PartState(name=name, kind="text")
        else:
            logger.debug("Ignoring unknown field %r", name)
            self._part = _PartState(name=name, kind="ignored")

    async def _feed_part(self, data: bytes) -> None:
        part = self._part
        if part is None:
            return
        if part.kind == "file" and part.writer is not None:
            await part.writer.write(data)
        elif part.kind == "text":
            if len(part.text) + len(data) > self._max_field_size:
                raise SubmissionParseError(
                    f"Field {part.name} exceeds {format_size(self._max_field_size)}",
                    field=part.name,
                )
            part.text.extend(data)

    async def _finish_part(self) -> None:
        part = self._part
        if part is None:
            return
        if part.kind == "file" and part.writer is not None:
            # Stays current until flushed so a failed close is still cleaned up
            await part.writer.close()
            self._part = None
            staged = part.writer.staged
            if not part.filename and staged.size == 0:
                # Browsers send an empty, unnamed part when no file was picked
                await self._staging.discard(staged)
                return
            self._submission.files.append(staged)
            logger.info("File staged: %s (%s)", staged.original_name, format_size(staged.size))
        else:
            self._part = None
            if part.kind == "text":
                self._assign_text(part.name, bytes(part.text))

    def _assign_text(self, name: str, raw: bytes) -> None:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Failed to read %s: %s", name, exc)
            return

        if name == IDENTIFIER_FIELD:
            self._submission.identifier = text
            logger.debug("Identifier set: %s", text)
        elif name == TTL_VALUE_FIELD:
            try:
                value = int(text.strip())
            except ValueError:
                logger.warning("Ignoring non-numeric ttl_value %r", text)
                return
            if value < 0:
                logger.warning("Ignoring negative ttl_value %r", text)
                return
            self._submission.ttl_value = value
        elif name == TTL_UNIT_FIELD:
            self._submission.ttl_unit = text
        elif name == PASSWORD_FIELD:
            self._submission.password = text

    async def _abort_current_part(self) -> None:
        part, self._part = self._part, None
        if part is None or part.writer is None:
            return
        try:
            await part.writer.close()
        except StagingError as exc:
            logger.warning("Failed to close partial upload %s: %s", part.writer.staged.path, exc)
        if not await self._staging.discard(part.writer.staged):
            logger.warning("Partial upload may remain at %s", part.writer.staged.path)


async def parse_submission(
    content_type: str | None,
    stream: AsyncIterator[bytes],
    staging: StagingArea,
    *,
    max_body_size: int,
    max_field_size: int,
) -> Submission:
    """Stream a multipart body into ``staging`` and collect the form fields."""

    parser = SubmissionParser(
        content_type,
        stream,
        staging,
        max_body_size=max_body_size,
        max_field_size=max_field_size,
    )
    return await parser.parse()


__all__ = ["SubmissionParser", "parse_submission"]
