"""The MIME part model.

A ``Part`` carries the metadata of one MIME body part, owns its payload
through a ``ContentStore`` and renders both the encoded body and the header
block. Parts nest: a ``multipart/alternative`` part holds its alternatives as
sub-parts (RFC 1341 7.2.3).

Boundaries, the blank line between headers and body, and message-level
ordering belong to whoever assembles the message.

Example:
    >>> part = Part(b"Hello=World").set_type("text/plain").set_encoding("quoted-printable")
    >>> part.get_content()
    b'Hello=3DWorld'
    >>> part.get_header_block()
    'Content-Type: text/plain\\r\\nContent-Transfer-Encoding: quoted-printable\\r\\n'
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import InitVar, dataclass, field
from pathlib import Path

from mimepart.config import DEFAULT_SETTINGS, PartSettings
from mimepart.constants import DISPOSITION_ATTACHMENT, ENCODING_8BIT, TYPE_OCTETSTREAM
from mimepart.content import BinaryStream, ContentStore, ContentValue, EncodingFilter
from mimepart.detection import detect_content_type, guess_from_filename
from mimepart.encoding import TransferEncoding, encoding_label
from mimepart.errors import ContentSizeError, NotAStreamError, PartTreeError

logger = logging.getLogger(__name__)

HeaderField = tuple[str, str]

_OPTIONAL_TEXT_FIELDS = (
    "id",
    "disposition",
    "filename",
    "description",
    "charset",
    "boundary",
    "location",
    "language",
)


def _require_text(name: str, value: object, optional: bool = True) -> None:
    if value is None and optional:
        return
    if not isinstance(value, str):
        raise TypeError(f"Part {name} must be a string; received '{type(value).__name__}'")


@dataclass(eq=False)
class Part:
    """One MIME body part.

    Attributes:
        type: Media type, e.g. 'text/plain' or 'multipart/alternative'.
        encoding: Content-Transfer-Encoding label. '7bit', '8bit' and 'binary'
            pass content through; 'quoted-printable' and 'base64' encode it.
            Unrecognized labels pass content through but still appear in headers.
        id: Content-ID without angle brackets.
        disposition: Content-Disposition, e.g. 'attachment' or 'inline'.
        filename: File name reported with the disposition.
        description: Content-Description.
        charset: charset parameter of Content-Type.
        boundary: boundary parameter of Content-Type for multipart parts.
        location: Content-Location.
        language: Content-Language.
        settings: Line end, line length and stream chunk size.

    Raises:
        InvalidContentKindError: If content is neither bytes-like nor a binary stream.
        TypeError: If a metadata field is not a string.

    Example:
        >>> part = Part(b"%PDF-1.7 ...", type="application/pdf", encoding="base64")
        >>> part.set_disposition("attachment").set_filename("report.pdf")
    """

    content: InitVar[ContentValue] = b""
    type: str = TYPE_OCTETSTREAM
    encoding: str = ENCODING_8BIT
    id: str | None = None
    disposition: str | None = None
    filename: str | None = None
    description: str | None = None
    charset: str | None = None
    boundary: str | None = None
    location: str | None = None
    language: str | None = None
    settings: PartSettings = field(default=DEFAULT_SETTINGS, repr=False)
    _store: ContentStore = field(init=False, repr=False)
    _parts: list[Part] = field(default_factory=list, init=False, repr=False)
    _parent: Part | None = field(default=None, init=False, repr=False)

    def __post_init__(self, content: ContentValue) -> None:
        _require_text("type", self.type, optional=False)
        self.encoding = encoding_label(self.encoding)
        _require_text("encoding", self.encoding, optional=False)
        for name in _OPTIONAL_TEXT_FIELDS:
            _require_text(name, getattr(self, name))
        self._store = ContentStore(content, self.settings)

    # Metadata setters

    def set_type(self, type: str = TYPE_OCTETSTREAM) -> Part:
        _require_text("type", type, optional=False)
        self.type = type
        return self

    def set_encoding(self, encoding: str | TransferEncoding = ENCODING_8BIT) -> Part:
        encoding = encoding_label(encoding)
        _require_text("encoding", encoding, optional=False)
        self.encoding = encoding
        return self

    def set_id(self, id: str | None) -> Part:
        return self._set_text("id", id)

    def set_disposition(self, disposition: str | None) -> Part:
        return self._set_text("disposition", disposition)

    def set_filename(self, filename: str | None) -> Part:
        return self._set_text("filename", filename)

    def set_description(self, description: str | None) -> Part:
        return self._set_text("description", description)

    def set_charset(self, charset: str | None) -> Part:
        return self._set_text("charset", charset)

    def set_boundary(self, boundary: str | None) -> Part:
        return self._set_text("boundary", boundary)

    def set_location(self, location: str | None) -> Part:
        return self._set_text("location", location)

    def set_language(self, language: str | None) -> Part:
        return self._set_text("language", language)

    def _set_text(self, name: str, value: str | None) -> Part:
        _require_text(name, value)
        setattr(self, name, value)
        return self

    # Content

    def set_content(self, content: ContentValue) -> Part:
        """Replace the payload with bytes or a borrowed binary stream.

        Raises:
            InvalidContentKindError: If content is of an unsupported kind. The
                previous payload is kept.
        """
        self._store.set_content(content)
        return self

    def is_stream(self) -> bool:
        """Check whether this part reads its content from a stream.

        If true, ``get_encoded_stream()`` can be used; otherwise only
        ``get_content()`` returns the encoded content.
        """
        return self._store.is_stream()

    @property
    def active_filter(self) -> EncodingFilter | None:
        return self._store.active_filter

    def get_encoded_stream(self, line_end: str | None = None) -> BinaryStream:
        """Return a stream yielding the encoded content without draining it.

        Useful for large attachments that should be piped to a socket or file.

        Raises:
            NotAStreamError: If the part holds buffered content.
            FilterAttachError: If the encoding filter cannot be installed.
        """
        if not self._store.is_stream():
            raise NotAStreamError("get_encoded_stream")
        return self._store.get_encoded_stream(self.encoding, line_end)

    def get_encoded_bytes(self, line_end: str | None = None) -> bytes:
        """Encode buffered content in one call.

        Raises:
            NotBufferedError: If the part reads its content from a stream.
        """
        return self._store.get_encoded_bytes(self.encoding, line_end)

    def get_content(self, line_end: str | None = None) -> bytes:
        """Return the content encoded with this part's transfer encoding.

        Streamed content is drained. Seekable streams are rewound afterwards
        so the part can be rendered again; non-seekable streams are consumed.
        """
        if not self._store.is_stream():
            return self.get_encoded_bytes(line_end)

        encoded = self._store.get_encoded_stream(self.encoding, line_end).read()
        if self._store.is_seekable():
            self._store.rewind()
        else:
            logger.warning(
                "Part content was read from a non-seekable stream; it cannot be read again"
            )
        return encoded

    def get_raw_content(self) -> bytes:
        """Return the unencoded content."""
        return self._store.get_raw_bytes()

    # Sub-parts

    def get_sub_parts(self) -> tuple[Part, ...]:
        return tuple(self._parts)

    def add_sub_part(self, part: Part) -> Part:
        """Append a sub-part, keeping insertion order.

        Raises:
            TypeError: If part is not a Part.
            PartTreeError: If part is this part or one of its ancestors, or
                already belongs to another part.
        """
        if not isinstance(part, Part):
            raise TypeError(f"Sub-part must be a Part; received '{type(part).__name__}'")
        if part is self:
            raise PartTreeError("A part cannot be its own sub-part")

        ancestor = self._parent
        while ancestor is not None:
            if ancestor is part:
                raise PartTreeError("A part cannot be added below one of its own sub-parts")
            ancestor = ancestor._parent

        if part._parent is not None:
            raise PartTreeError("Part already belongs to another part; remove it there first")

        part._parent = self
        self._parts.append(part)
        return self

    def remove_sub_part(self, part: Part) -> Part:
        """Detach a sub-part so it can be added elsewhere.

        Raises:
            ValueError: If part is not a direct sub-part of this part.
        """
        for index, candidate in enumerate(self._parts):
            if candidate is part:
                del self._parts[index]
                part._parent = None
                return self
        raise ValueError("Part is not a sub-part of this part")

    def walk(self) -> Iterator[Part]:
        """Iterate over this part and all nested sub-parts, depth first."""
        yield self
        for part in self._parts:
            yield from part.walk()

    # Headers

    def get_header_fields(self, line_end: str | None = None) -> list[HeaderField]:
        """Create the ordered list of (name, value) header pairs for this part.

        The boundary parameter is placed on its own continuation line.
        """
        eol = line_end if line_end is not None else self.settings.line_end
        headers: list[HeaderField] = []

        content_type = self.type
        if self.charset:
            content_type += f"; charset={self.charset}"
        if self.boundary:
            content_type += f";{eol} boundary=\"{self.boundary}\""
        headers.append(("Content-Type", content_type))

        if self.encoding:
            headers.append(("Content-Transfer-Encoding", self.encoding))

        if self.id:
            headers.append(("Content-ID", f"<{self.id}>"))

        if self.disposition:
            disposition = self.disposition
            if self.filename:
                disposition += f"; filename=\"{self.filename}\""
            headers.append(("Content-Disposition", disposition))

        if self.description:
            headers.append(("Content-Description", self.description))

        if self.location:
            headers.append(("Content-Location", self.location))

        if self.language:
            headers.append(("Content-Language", self.language))

        return headers

    def get_header_block(self, line_end: str | None = None) -> str:
        """Return the headers as text, each line terminated by line_end."""
        eol = line_end if line_end is not None else self.settings.line_end
        return "".join(f"{name}: {value}{eol}" for name, value in self.get_header_fields(eol))

    # Factories

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        filename: str | None = None,
        content_type: str | None = None,
        encoding: str | TransferEncoding = TransferEncoding.BASE64,
        disposition: str | None = None,
        settings: PartSettings = DEFAULT_SETTINGS,
    ) -> Part:
        """Create a buffered part, detecting its content type when not given.

        Args:
            content: Binary content.
            filename: Optional file name; path components are stripped.
            content_type: Media type. Detected from filename and content if None.
            encoding: Transfer encoding, base64 by default.
            disposition: Content-Disposition; defaults to 'attachment' when a
                filename is given.
            settings: Encoding settings for the part.
        """
        if filename is not None:
            filename = os.path.basename(filename.replace("\\", "/"))
        if content_type is None:
            content_type = detect_content_type(content, filename)
        if disposition is None and filename:
            disposition = DISPOSITION_ATTACHMENT

        return cls(
            content,
            type=content_type,
            encoding=encoding_label(encoding),
            disposition=disposition,
            filename=filename or None,
            settings=settings,
        )

    @classmethod
    def from_file(
        cls,
        file_path: str | Path,
        filename: str | None = None,
        content_type: str | None = None,
        encoding: str | TransferEncoding = TransferEncoding.BASE64,
        disposition: str = DISPOSITION_ATTACHMENT,
        settings: PartSettings = DEFAULT_SETTINGS,
    ) -> Part:
        """Create a buffered attachment part from a file with a bounded read.

        The file is read into memory and closed, so the part does not hold
        an open handle.

        Raises:
            ContentSizeError: If the file exceeds settings.max_content_size.
            FileNotFoundError: If the file does not exist.
        """
        path = Path(file_path)
        max_size = settings.max_content_size

        # Early check to reject obviously oversized files without opening them
        file_size = path.stat().st_size
        if file_size > max_size:
            raise ContentSizeError.for_file(path.name, max_size, file_size)

        # Never load more than max_size + 1 bytes even if the file grows after stat()
        with path.open("rb") as f:
            content = f.read(max_size + 1)

        if len(content) > max_size:
            raise ContentSizeError.for_file(path.name, max_size, len(content))

        effective_filename = filename if filename is not None else path.name
        if content_type is None:
            content_type = guess_from_filename(path.name) or detect_content_type(
                content, effective_filename
            )

        return cls.from_bytes(
            content,
            filename=effective_filename,
            content_type=content_type,
            encoding=encoding,
            disposition=disposition,
            settings=settings,
        )
