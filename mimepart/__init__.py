"""MIME part model with buffered and streamed content encoding.

This package provides the Part class, which renders one MIME body part into
its header block and transfer-encoded body, and the ContentStore holding the
payload either in memory or as a borrowed stream.

Example:
    >>> from mimepart import Part, TransferEncoding
    >>> part = Part(b"\\x00\\x01\\x02\\x03", encoding=TransferEncoding.BASE64)
    >>> part.get_content()
    b'AAECAw=='

For large payloads, pass a binary stream and pipe the encoded stream:
    >>> with open("video.mp4", "rb") as f:
    ...     part = Part(f, type="video/mp4", encoding="base64")
    ...     shutil.copyfileobj(part.get_encoded_stream(), sock_file)
"""

from mimepart.config import DEFAULT_SETTINGS, PartSettings
from mimepart.constants import (
    DISPOSITION_ATTACHMENT,
    DISPOSITION_INLINE,
    LINE_LENGTH,
    LINEEND,
    MULTIPART_ALTERNATIVE,
    MULTIPART_MIXED,
    MULTIPART_RELATED,
    TYPE_HTML,
    TYPE_OCTETSTREAM,
    TYPE_TEXT,
)
from mimepart.content import BinaryStream, Buffered, ContentStore, EncodingFilter, Payload, Streamed
from mimepart.detection import detect_content_type
from mimepart.encoding import EncodingKind, TransferEncoding, encode, encoding_kind
from mimepart.errors import (
    ContentModeError,
    ContentSizeError,
    FilterAttachError,
    InvalidContentKindError,
    MimePartError,
    NotAStreamError,
    NotBufferedError,
    PartTreeError,
)
from mimepart.part import Part

__all__ = [
    "Part",
    "ContentStore",
    "EncodingFilter",
    "BinaryStream",
    "Buffered",
    "Streamed",
    "Payload",
    "TransferEncoding",
    "EncodingKind",
    "encode",
    "encoding_kind",
    "detect_content_type",
    "PartSettings",
    "DEFAULT_SETTINGS",
    "MimePartError",
    "InvalidContentKindError",
    "ContentModeError",
    "NotAStreamError",
    "NotBufferedError",
    "FilterAttachError",
    "PartTreeError",
    "ContentSizeError",
    "LINEEND",
    "LINE_LENGTH",
    "TYPE_OCTETSTREAM",
    "TYPE_TEXT",
    "TYPE_HTML",
    "MULTIPART_ALTERNATIVE",
    "MULTIPART_MIXED",
    "MULTIPART_RELATED",
    "DISPOSITION_ATTACHMENT",
    "DISPOSITION_INLINE",
]
