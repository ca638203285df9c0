"""Shared fixtures for mimepart tests."""

import io

import pytest


class OneShotStream(io.RawIOBase):
    """Readable stream that cannot seek, like a socket or pipe."""

    def __init__(self, data: bytes):
        super().__init__()
        self._data = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        chunk = self._data.read(len(buffer))
        buffer[: len(chunk)] = chunk
        return len(chunk)


@pytest.fixture
def one_shot_stream():
    """Factory for non-seekable streams."""
    return OneShotStream


@pytest.fixture
def binary_payload() -> bytes:
    """Every byte value, repeated so encoded output spans many lines."""
    return bytes(range(256)) * 12
