"""Tests for the transfer-encoding codecs."""

import base64
import binascii

import pytest

from mimepart.encoding import (
    Base64Encoder,
    EncodingKind,
    IdentityEncoder,
    QuotedPrintableEncoder,
    TransferEncoding,
    encode,
    encoding_kind,
    make_encoder,
)


def _lines(encoded: bytes, line_end: bytes = b"\r\n") -> list[bytes]:
    return encoded.split(line_end)


class TestEncodingKind:
    """Resolution of Content-Transfer-Encoding labels."""

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("base64", EncodingKind.BASE64),
            ("BASE64", EncodingKind.BASE64),
            ("quoted-printable", EncodingKind.QUOTED_PRINTABLE),
            ("Quoted-Printable", EncodingKind.QUOTED_PRINTABLE),
            (TransferEncoding.BASE64, EncodingKind.BASE64),
            ("7bit", EncodingKind.IDENTITY),
            ("8bit", EncodingKind.IDENTITY),
            ("binary", EncodingKind.IDENTITY),
            ("", EncodingKind.IDENTITY),
            (None, EncodingKind.IDENTITY),
        ],
    )
    def test_recognized_labels(self, label, expected):
        """Test that known labels map to their transform, case-insensitively."""
        assert encoding_kind(label) is expected

    def test_unknown_label_degrades_to_identity(self, caplog: pytest.LogCaptureFixture):
        """Test that an unrecognized label passes content through and logs it."""
        with caplog.at_level("DEBUG", logger="mimepart.encoding"):
            assert encoding_kind("x-uuencode") is EncodingKind.IDENTITY
        assert "x-uuencode" in caplog.text

    def test_make_encoder_types(self):
        """Test that each kind builds the matching encoder."""
        assert isinstance(make_encoder(EncodingKind.IDENTITY), IdentityEncoder)
        assert isinstance(make_encoder(EncodingKind.BASE64), Base64Encoder)
        assert isinstance(make_encoder(EncodingKind.QUOTED_PRINTABLE), QuotedPrintableEncoder)


class TestQuotedPrintable:
    """Quoted-printable encoding."""

    def test_equals_sign_escaped(self):
        """Test the short Hello=World example stays on one line."""
        assert encode(b"Hello=World", "quoted-printable") == b"Hello=3DWorld"

    def test_line_breaks_are_escaped(self):
        """Test that CR and LF are encoded so binary content survives."""
        assert encode(b"a\r\nb", "quoted-printable") == b"a=0D=0Ab"

    def test_trailing_whitespace_escaped(self):
        """Test that whitespace ending the output is encoded."""
        assert encode(b"abc ", "quoted-printable") == b"abc=20"
        assert encode(b"abc\t", "quoted-printable") == b"abc=09"

    def test_inner_whitespace_literal(self):
        """Test that spaces inside a line are left alone."""
        assert encode(b"a b\tc", "quoted-printable") == b"a b\tc"

    def test_leading_dot_escaped(self):
        """Test that a dot starting a line is encoded."""
        assert encode(b".hidden", "quoted-printable") == b"=2Ehidden"

    def test_soft_line_breaks(self):
        """Test that long input is wrapped with soft breaks within 76 columns."""
        encoded = encode(b"a" * 200, "quoted-printable")
        lines = _lines(encoded)
        assert len(lines) == 3
        assert lines[0] == b"a" * 75 + b"="
        assert lines[1] == b"a" * 75 + b"="
        assert lines[2] == b"a" * 50

    def test_escape_sequences_not_split(self, binary_payload: bytes):
        """Test that no line exceeds the limit and no escape is cut in half."""
        encoded = encode(binary_payload, "quoted-printable")
        for line in _lines(encoded):
            assert len(line) <= 76
            body = line[:-1] if line.endswith(b"=") else line
            assert b"=" not in body[-2:]

    def test_custom_line_end_and_length(self):
        """Test wrapping with a bare LF and a short line length."""
        encoded = encode(b"x" * 30, "quoted-printable", line_end="\n", line_length=10)
        lines = encoded.split(b"\n")
        assert all(len(line) <= 10 for line in lines)
        assert lines[0] == b"x" * 9 + b"="

    @pytest.mark.parametrize("line_end", ["\r\n", "\n"])
    def test_round_trip(self, binary_payload: bytes, line_end: str):
        """Test that decoding restores arbitrary binary input."""
        encoded = encode(binary_payload, "quoted-printable", line_end=line_end)
        assert binascii.a2b_qp(encoded) == binary_payload

    def test_chunked_input_matches_whole(self, binary_payload: bytes):
        """Test that feeding chunks gives the same output as one call."""
        encoder = QuotedPrintableEncoder()
        chunked = b"".join(
            encoder.encode(binary_payload[i : i + 5]) for i in range(0, len(binary_payload), 5)
        )
        chunked += encoder.flush()
        assert chunked == encode(binary_payload, "quoted-printable")

    def test_line_length_too_small(self):
        """Test that a line length without room for escapes is rejected."""
        with pytest.raises(ValueError, match="line_length"):
            QuotedPrintableEncoder(line_length=4)


class TestBase64:
    """Base64 encoding."""

    def test_short_input(self):
        """Test the standard alphabet on a four byte input."""
        assert encode(bytes([0, 1, 2, 3]), "base64") == b"AAECAw=="

    def test_wraps_at_76_without_trailing_break(self):
        """Test that output is wrapped and the last line has no terminator."""
        encoded = encode(b"\xff" * 100, "base64")
        lines = _lines(encoded)
        assert [len(line) for line in lines] == [76, 60]
        assert not encoded.endswith(b"\r\n")

    def test_round_trip(self, binary_payload: bytes):
        """Test that decoding restores arbitrary binary input."""
        encoded = encode(binary_payload, TransferEncoding.BASE64)
        assert base64.b64decode(encoded) == binary_payload

    @pytest.mark.parametrize("chunk_size", [1, 2, 4, 57, 1000])
    def test_chunked_input_matches_whole(self, binary_payload: bytes, chunk_size: int):
        """Test that chunk boundaries do not change the output."""
        encoder = Base64Encoder()
        chunked = b"".join(
            encoder.encode(binary_payload[i : i + chunk_size])
            for i in range(0, len(binary_payload), chunk_size)
        )
        chunked += encoder.flush()
        assert chunked == encode(binary_payload, "base64")

    def test_empty_input(self):
        """Test that empty input encodes to nothing."""
        assert encode(b"", "base64") == b""


class TestIdentity:
    """Identity encodings."""

    @pytest.mark.parametrize("label", ["7bit", "8bit", "binary", "x-custom", ""])
    def test_content_unchanged_without_wrapping(self, label: str):
        """Test that identity encodings never wrap or alter content."""
        content = b"line without breaks " * 20
        assert encode(content, label) == content
