"""Payload storage for MIME parts.

A ``ContentStore`` holds content in exactly one of two modes:

- ``Buffered``: an owned, immutable ``bytes`` value.
- ``Streamed``: a borrowed binary stream. The store never closes it; whoever
  opened the stream disposes of it.

Encoded streams are produced by wrapping the borrowed handle in an
``EncodingFilter``. The store keeps a single active-filter slot: requesting a
new encoded stream detaches the previous filter before attaching a fresh one,
so filters never stack.
"""

from __future__ import annotations

import errno
import io
import logging
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from mimepart.config import DEFAULT_SETTINGS, PartSettings
from mimepart.encoding import EncodingKind, TransferEncoding, encode, encoding_kind, make_encoder
from mimepart.errors import (
    FilterAttachError,
    InvalidContentKindError,
    NotAStreamError,
    NotBufferedError,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class BinaryStream(Protocol):
    """Minimal interface of a readable binary stream handle."""

    def read(self, size: int = -1, /) -> bytes: ...


@dataclass(frozen=True)
class Buffered:
    """Content held fully in memory."""

    data: bytes


@dataclass(frozen=True)
class Streamed:
    """Content read incrementally from a borrowed stream handle."""

    handle: BinaryStream


Payload = Union[Buffered, Streamed]

ContentValue = Union[bytes, bytearray, memoryview, BinaryStream]


def to_payload(value: object) -> Payload:
    """Classify raw content as buffered or streamed.

    Raises:
        InvalidContentKindError: If value is neither bytes-like nor a binary stream.
            Text streams and ``str`` are rejected because their encoding is unknown.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Buffered(bytes(value))
    if isinstance(value, io.TextIOBase):
        raise InvalidContentKindError(value)
    if isinstance(value, BinaryStream) and callable(getattr(value, "read", None)):
        return Streamed(value)
    raise InvalidContentKindError(value)


def is_seekable(handle: object) -> bool:
    """Report whether a stream handle can be repositioned."""
    seekable = getattr(handle, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except ValueError:
        # closed file objects raise instead of answering
        return False


class EncodingFilter(io.RawIOBase):
    """Read-side transform producing encoded bytes from a borrowed stream.

    The filter pulls ``chunk_size`` bytes at a time from the source, so the
    whole payload is never materialized. Closing the filter detaches it from
    the source without closing the source.
    """

    def __init__(
        self,
        source: BinaryStream,
        kind: EncodingKind,
        line_end: str,
        line_length: int,
        chunk_size: int,
    ) -> None:
        super().__init__()
        self._source = source
        self.kind = kind
        self._line_end = line_end
        self._line_length = line_length
        self._chunk_size = chunk_size
        self.reset()

    def reset(self) -> None:
        """Discard buffered output and restart encoding from the source's position."""
        self._encoder = make_encoder(self.kind, self._line_length, self._line_end)
        self._pending = bytearray()
        self._eof = False

    @property
    def source(self) -> BinaryStream:
        return self._source

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        if self.closed:
            raise ValueError(f"I/O operation on a detached {self.kind.value} filter")
        while not self._pending and not self._eof:
            chunk = self._source.read(self._chunk_size)
            if chunk is None:
                # non-blocking source with nothing ready; encoder state is kept for a retry
                raise BlockingIOError(errno.EAGAIN, "Stream source has no data available yet")
            if chunk:
                self._pending += self._encoder.encode(chunk)
            else:
                self._pending += self._encoder.flush()
                self._eof = True
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        del self._pending[:size]
        return size


class ContentStore:
    """Holds a part's payload and derives encoded views of it.

    Args:
        content: Initial content, bytes-like or a binary stream handle.
        settings: Line length and chunk size used by encoded views.

    Raises:
        InvalidContentKindError: If content is of an unsupported kind.
    """

    def __init__(self, content: ContentValue = b"", settings: PartSettings = DEFAULT_SETTINGS):
        self.settings = settings
        self._payload: Payload = Buffered(b"")
        self._active_filter: EncodingFilter | None = None
        self.set_content(content)

    @property
    def payload(self) -> Payload:
        return self._payload

    @property
    def active_filter(self) -> EncodingFilter | None:
        """The filter attached by the last encoded-stream request, if any."""
        return self._active_filter

    def set_content(self, value: ContentValue) -> None:
        """Replace the payload, switching mode to match the value.

        The value is classified before anything is touched, so a rejected
        value leaves the previous payload and mode intact.
        """
        payload = to_payload(value)
        self._detach_filter()
        streamed = isinstance(payload, Streamed)
        if streamed != self.is_stream():
            logger.debug("Content mode switched to %s", "streamed" if streamed else "buffered")
        self._payload = payload

    def is_stream(self) -> bool:
        return isinstance(self._payload, Streamed)

    def is_seekable(self) -> bool:
        """Report whether streamed content can be re-read; buffered content always can."""
        if isinstance(self._payload, Streamed):
            return is_seekable(self._payload.handle)
        return True

    def rewind(self) -> None:
        """Seek a seekable stream back to its start and restart the active filter."""
        if not isinstance(self._payload, Streamed):
            raise NotAStreamError("rewind")
        self._payload.handle.seek(0)  # type: ignore[attr-defined]
        if self._active_filter is not None:
            self._active_filter.reset()

    def get_raw_bytes(self) -> bytes:
        """Return the unencoded payload.

        Streamed content is drained to completion. A seekable stream is moved
        back to the position it had before the drain; a non-seekable stream
        is consumed and will read empty afterwards.
        """
        if isinstance(self._payload, Buffered):
            return self._payload.data

        handle = self._payload.handle
        if not is_seekable(handle):
            logger.warning("Draining non-seekable stream; subsequent reads will return no data")
            return handle.read()

        start = handle.tell()  # type: ignore[attr-defined]
        data = handle.read()
        handle.seek(start)  # type: ignore[attr-defined]
        return data

    def get_encoded_stream(
        self, encoding: str | TransferEncoding, line_end: str | None = None
    ) -> BinaryStream:
        """Return a stream yielding the payload in the given transfer encoding.

        Identity encodings return the borrowed handle itself. Other encodings
        replace the active filter with a fresh one wrapping the handle.

        Raises:
            NotAStreamError: If the content is buffered.
            FilterAttachError: If the handle is closed or not readable.
        """
        if not isinstance(self._payload, Streamed):
            raise NotAStreamError("get_encoded_stream")

        self._detach_filter()
        handle = self._payload.handle
        kind = encoding_kind(encoding)
        if kind is EncodingKind.IDENTITY:
            return handle

        self._check_attachable(handle, kind)
        self._active_filter = EncodingFilter(
            handle,
            kind,
            line_end if line_end is not None else self.settings.line_end,
            self.settings.line_length,
            self.settings.chunk_size,
        )
        logger.debug("Attached %s filter to stream %r", kind.value, handle)
        return self._active_filter

    def get_encoded_bytes(
        self, encoding: str | TransferEncoding, line_end: str | None = None
    ) -> bytes:
        """Encode buffered content in one call.

        Identity encodings return the bytes unchanged, without line wrapping.

        Raises:
            NotBufferedError: If the content is streamed (a NotAStreamError).
        """
        if not isinstance(self._payload, Buffered):
            raise NotBufferedError("get_encoded_bytes")
        return encode(
            self._payload.data,
            encoding,
            line_end if line_end is not None else self.settings.line_end,
            self.settings.line_length,
        )

    @staticmethod
    def _check_attachable(handle: BinaryStream, kind: EncodingKind) -> None:
        if getattr(handle, "closed", False):
            raise FilterAttachError(kind.value, "stream is closed")
        readable = getattr(handle, "readable", None)
        if readable is not None and not readable():
            raise FilterAttachError(kind.value, "stream is not readable")

    def _detach_filter(self) -> None:
        if self._active_filter is None:
            return
        logger.debug("Detached %s filter", self._active_filter.kind.value)
        self._active_filter.close()
        self._active_filter = None
