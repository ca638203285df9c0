"""MIME constants shared by the part model and the codecs.

Line Endings:
    RFC 5322 mandates CRLF on the wire, so ``LINEEND`` defaults to ``"\\r\\n"``.
    Callers that write to local files may pass ``"\\n"`` instead.

Line Length:
    RFC 2045 limits encoded lines to 76 characters, excluding the line end.
"""

from __future__ import annotations

LINEEND = "\r\n"
LINE_LENGTH = 76

# Default maximum size for file-backed parts: 10MB
DEFAULT_MAX_CONTENT_SIZE = 10 * 1024 * 1024

# Read size used when pulling bytes from a borrowed stream
DEFAULT_CHUNK_SIZE = 8192

# Media types
TYPE_OCTETSTREAM = "application/octet-stream"
TYPE_TEXT = "text/plain"
TYPE_HTML = "text/html"
MULTIPART_ALTERNATIVE = "multipart/alternative"
MULTIPART_MIXED = "multipart/mixed"
MULTIPART_RELATED = "multipart/related"

# Content-Disposition values
DISPOSITION_ATTACHMENT = "attachment"
DISPOSITION_INLINE = "inline"

# Content-Transfer-Encoding labels
ENCODING_7BIT = "7bit"
ENCODING_8BIT = "8bit"
ENCODING_BINARY = "binary"
ENCODING_QUOTEDPRINTABLE = "quoted-printable"
ENCODING_BASE64 = "base64"

IDENTITY_ENCODINGS: frozenset[str] = frozenset({ENCODING_7BIT, ENCODING_8BIT, ENCODING_BINARY})
