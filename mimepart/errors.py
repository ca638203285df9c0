"""Exceptions raised by mimepart.

Every error derives from ``MimePartError`` and from the builtin exception a
caller would naturally catch (``TypeError``, ``ValueError``, ``RuntimeError``)
so existing handlers keep working.
"""

from __future__ import annotations

from typing import Any


class MimePartError(Exception):
    """Base class for all mimepart errors."""


class InvalidContentKindError(MimePartError, TypeError):
    """Raised when content is neither a bytes-like object nor a binary stream.

    Attributes:
        received: Name of the type that was rejected.
    """

    def __init__(self, value: Any) -> None:
        self.received = type(value).__name__
        super().__init__(
            f"Content must be bytes or a binary stream; received '{self.received}'"
        )


class ContentModeError(MimePartError, RuntimeError):
    """Raised when an operation does not match the current content mode."""


class NotAStreamError(ContentModeError):
    """Raised when a stream-only operation is used on buffered content."""

    def __init__(self, operation: str = "get_encoded_stream") -> None:
        self.operation = operation
        super().__init__(f"Attempt to call '{operation}' on a part holding buffered content")


class NotBufferedError(NotAStreamError):
    """Raised when a buffered-only operation is used on streamed content.

    Subclasses NotAStreamError, so handlers for content mode mismatches written
    against NotAStreamError catch it as well.
    """

    def __init__(self, operation: str = "get_encoded_bytes") -> None:
        self.operation = operation
        ContentModeError.__init__(
            self,
            f"Attempt to call '{operation}' on a part holding streamed content; "
            f"use get_encoded_stream() or get_content() instead"
        )


class FilterAttachError(MimePartError, RuntimeError):
    """Raised when an encoding filter cannot be installed on a stream.

    Attributes:
        encoding: Transfer encoding whose filter failed to attach.
        reason: Short description of the failure.
    """

    def __init__(self, encoding: str, reason: str) -> None:
        self.encoding = encoding
        self.reason = reason
        super().__init__(f"Failed to append {encoding} filter: {reason}")


class PartTreeError(MimePartError, ValueError):
    """Raised when adding a sub-part would break single ownership or create a cycle."""


class ContentSizeError(MimePartError, ValueError):
    """Raised when file-backed content exceeds the configured maximum size."""

    @classmethod
    def for_file(cls, filename: str, max_size: int, actual_size: int) -> "ContentSizeError":
        """Create a ContentSizeError with a formatted message."""
        message = (
            f"Content of '{filename}' exceeds maximum size of "
            f"{max_size / (1024 * 1024):.2f}MB "
            f"(size: {actual_size / (1024 * 1024):.2f}MB)"
        )
        return cls(message)
