"""Pytest configuration and fixtures."""

import pytest

BOUNDARY = "AbCdEfGh12345678"


def drain(body, size):
    """Read `body` to the end through readinto() with a `size`-byte buffer."""
    buf = bytearray(size)
    out = bytearray()
    while True:
        n = body.readinto(buf)
        if not n:
            return bytes(out)
        out += buf[:n]


@pytest.fixture
def boundary():
    return BOUNDARY


@pytest.fixture
def boundary_source():
    """Deterministic boundary source."""
    return lambda length: BOUNDARY[:length]


class FailingStream:
    """Binary stream that yields `data` and then raises on the next read."""

    def __init__(self, data: bytes, exc: Exception | None = None) -> None:
        self.data = data
        self.exc = exc or OSError("disk on fire")
        self.pos = 0
        self.closed = False

    def readinto(self, buffer):
        if self.pos >= len(self.data):
            raise self.exc
        chunk = self.data[self.pos : self.pos + len(buffer)]
        buffer[: len(chunk)] = chunk
        self.pos += len(chunk)
        return len(chunk)

    def close(self):
        self.closed = True
