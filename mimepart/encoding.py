"""Content-transfer-encoding codecs.

The encoders are incremental: ``encode()`` accepts arbitrary chunks and
``flush()`` emits whatever is still held back. The buffered and streamed
content paths share them, so both produce identical output for the same bytes.

Example:
    >>> encode(b"Hello=World", "quoted-printable")
    b'Hello=3DWorld'
    >>> encode(b"\\x00\\x01\\x02\\x03", "base64")
    b'AAECAw=='
"""

from __future__ import annotations

import base64
import logging
from enum import Enum
from typing import Protocol

from mimepart.constants import (
    ENCODING_7BIT,
    ENCODING_8BIT,
    ENCODING_BASE64,
    ENCODING_BINARY,
    ENCODING_QUOTEDPRINTABLE,
    IDENTITY_ENCODINGS,
    LINE_LENGTH,
    LINEEND,
)

logger = logging.getLogger(__name__)

# Quoted-printable needs room for "=XX" plus the soft break marker
MIN_LINE_LENGTH = 8


class TransferEncoding(str, Enum):
    """Recognized Content-Transfer-Encoding labels."""

    SEVEN_BIT = ENCODING_7BIT
    EIGHT_BIT = ENCODING_8BIT
    BINARY = ENCODING_BINARY
    QUOTED_PRINTABLE = ENCODING_QUOTEDPRINTABLE
    BASE64 = ENCODING_BASE64


class EncodingKind(Enum):
    """What the encoding pipeline actually does with the bytes."""

    IDENTITY = "identity"
    QUOTED_PRINTABLE = ENCODING_QUOTEDPRINTABLE
    BASE64 = ENCODING_BASE64


def encoding_label(encoding: str | TransferEncoding) -> str:
    """Return the plain header label for an encoding given as str or enum member."""
    if isinstance(encoding, TransferEncoding):
        return encoding.value
    return encoding


def encoding_kind(encoding: str | TransferEncoding | None) -> EncodingKind:
    """Resolve a transfer-encoding label to the transform it selects.

    Matching is case-insensitive. Unrecognized labels degrade to identity.
    """
    normalized = encoding_label(encoding or "").strip().lower()
    if normalized == ENCODING_QUOTEDPRINTABLE:
        return EncodingKind.QUOTED_PRINTABLE
    if normalized == ENCODING_BASE64:
        return EncodingKind.BASE64
    if normalized and normalized not in IDENTITY_ENCODINGS:
        logger.debug(
            "Unrecognized transfer encoding '%s', passing content through unchanged", encoding
        )
    return EncodingKind.IDENTITY


class Encoder(Protocol):
    """Incremental byte encoder."""

    def encode(self, data: bytes) -> bytes: ...

    def flush(self) -> bytes: ...


class IdentityEncoder:
    """Pass-through encoder used for 7bit, 8bit, binary and unknown labels."""

    def encode(self, data: bytes) -> bytes:
        return data

    def flush(self) -> bytes:
        return b""


# Token for every byte value: printable ASCII except "=" stays literal,
# everything else (CR and LF included, so binary content survives) is escaped.
_QP_TOKENS: tuple[bytes, ...] = tuple(
    bytes((byte,)) if (33 <= byte <= 126 and byte != 0x3D) or byte in (0x09, 0x20)
    else b"=%02X" % byte
    for byte in range(256)
)
_QP_WHITESPACE = (0x09, 0x20)


class QuotedPrintableEncoder:
    """Incremental quoted-printable encoder (RFC 2045 section 6.7).

    Physical lines never exceed ``line_length`` characters including the
    trailing ``=`` of a soft line break. Whitespace ending the output is
    escaped, and a leading ``.`` is escaped so the output is safe for SMTP.

    Args:
        line_length: Maximum characters per encoded line, excluding ``line_end``.
        line_end: Line terminator used for soft line breaks.
    """

    def __init__(self, line_length: int = LINE_LENGTH, line_end: str = LINEEND) -> None:
        if line_length < MIN_LINE_LENGTH:
            raise ValueError(f"line_length must be at least {MIN_LINE_LENGTH}, got {line_length}")
        self._line_length = line_length
        self._max_body = line_length - 1
        self._line_end = line_end.encode("ascii")
        self._line = bytearray()

    def encode(self, data: bytes) -> bytes:
        out = bytearray()
        for byte in data:
            self._append(_QP_TOKENS[byte], out)
        return bytes(out)

    def flush(self) -> bytes:
        line = self._line
        out = bytearray()
        if line and line[-1] in _QP_WHITESPACE:
            escaped = b"=%02X" % line.pop()
            if len(line) + len(escaped) > self._line_length:
                out += line + b"=" + self._line_end
                line.clear()
            line += escaped
        out += line
        line.clear()
        return bytes(out)

    def _append(self, token: bytes, out: bytearray) -> None:
        line = self._line
        if not line and token == b".":
            token = b"=2E"
        if len(line) + len(token) > self._max_body:
            # whitespace before the soft break marker is not at line end
            out += line + b"=" + self._line_end
            line.clear()
            if token == b".":
                token = b"=2E"
        line += token


class Base64Encoder:
    """Incremental base64 encoder wrapping output at ``line_length`` columns.

    Lines are separated by ``line_end``; no terminator follows the last line.
    """

    def __init__(self, line_length: int = LINE_LENGTH, line_end: str = LINEEND) -> None:
        if line_length < MIN_LINE_LENGTH:
            raise ValueError(f"line_length must be at least {MIN_LINE_LENGTH}, got {line_length}")
        self._line_length = line_length
        self._line_end = line_end.encode("ascii")
        self._pending = b""
        self._column = 0

    def encode(self, data: bytes) -> bytes:
        data = self._pending + bytes(data)
        usable = len(data) - len(data) % 3
        self._pending = data[usable:]
        return self._wrap(base64.b64encode(data[:usable]))

    def flush(self) -> bytes:
        tail, self._pending = self._pending, b""
        return self._wrap(base64.b64encode(tail))

    def _wrap(self, encoded: bytes) -> bytes:
        out = bytearray()
        position = 0
        while position < len(encoded):
            if self._column == self._line_length:
                out += self._line_end
                self._column = 0
            take = min(self._line_length - self._column, len(encoded) - position)
            out += encoded[position : position + take]
            position += take
            self._column += take
        return bytes(out)


def make_encoder(
    kind: EncodingKind, line_length: int = LINE_LENGTH, line_end: str = LINEEND
) -> Encoder:
    """Create a fresh incremental encoder for the given kind."""
    if kind is EncodingKind.QUOTED_PRINTABLE:
        return QuotedPrintableEncoder(line_length, line_end)
    if kind is EncodingKind.BASE64:
        return Base64Encoder(line_length, line_end)
    return IdentityEncoder()


def encode(
    content: bytes,
    encoding: str | TransferEncoding,
    line_end: str = LINEEND,
    line_length: int = LINE_LENGTH,
) -> bytes:
    """Encode a complete byte string in one call.

    Identity encodings return ``content`` unchanged, without line wrapping.
    """
    kind = encoding_kind(encoding)
    if kind is EncodingKind.IDENTITY:
        return content
    encoder = make_encoder(kind, line_length, line_end)
    return encoder.encode(content) + encoder.flush()
