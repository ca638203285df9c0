"""Content type detection for new parts.

Uses the file name when one is available and falls back to magic byte
signatures, so ``Part.from_bytes`` and ``Part.from_file`` can label content
the caller did not label.

Example:
    >>> from mimepart.detection import detect_content_type
    >>> detect_content_type(b"%PDF-1.7 ...")
    'application/pdf'
"""

from __future__ import annotations

import logging
import mimetypes

import puremagic

from mimepart.constants import TYPE_OCTETSTREAM, TYPE_TEXT

logger = logging.getLogger(__name__)

# Alternative types puremagic may report, mapped to the registered type
MIME_TYPE_EQUIVALENCES: dict[str, str] = {
    "image/x-ms-bmp": "image/bmp",
    "application/x-gzip": "application/gzip",
    "application/x-zip-compressed": "application/zip",
}


def _looks_like_text(content: bytes) -> bool:
    if b"\x00" in content:
        return False
    try:
        content.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def guess_from_filename(filename: str | None) -> str | None:
    """Guess a content type from a file name's extension."""
    if not filename:
        return None
    guessed, _ = mimetypes.guess_type(filename)
    return guessed


def detect_content_type(
    content: bytes, filename: str | None = None, default: str = TYPE_OCTETSTREAM
) -> str:
    """Determine the content type for a payload.

    Args:
        content: The binary content to inspect.
        filename: Optional file name; its extension takes precedence.
        default: Type returned when nothing can be identified.

    Returns:
        A ``type/subtype`` string.
    """
    guessed = guess_from_filename(filename)
    if guessed:
        return guessed

    # puremagic rejects empty input
    if not content:
        return default

    try:
        detected = puremagic.magic_string(content)
    except puremagic.PureError:
        logger.debug("Could not identify content type from magic bytes, checking for text")
        return TYPE_TEXT if _looks_like_text(content) else default

    for match in detected:
        if match.mime_type:
            return MIME_TYPE_EQUIVALENCES.get(match.mime_type, match.mime_type)
    return TYPE_TEXT if _looks_like_text(content) else default
