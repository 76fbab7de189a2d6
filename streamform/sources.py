"""
Byte sources shared by the encoder and the body reader.

Every piece of a body (rendered text, per-field headers, payloads, the closing
delimiter) is read through the same call: ``readinto(buffer) -> int``, where 0
means the source is exhausted.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol

from .errors import FieldTypeError


class ByteSource(Protocol):
    def readinto(self, buffer: Any) -> int | None: ...


class Cursor(io.BytesIO):
    """In-memory source that knows when it has been fully consumed."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(data)
        self._size = len(data)

    @property
    def at_end(self) -> bool:
        return self.tell() >= self._size

    def __len__(self) -> int:
        return self._size


class _ChunkSource:
    """
    Adapts chunk producers to ``readinto``.

    A chunk larger than the caller's buffer is kept and handed out over the
    following calls, so at most one chunk is held at a time.
    """

    def __init__(self, raw: Any) -> None:
        self._raw = raw
        self._pending = memoryview(b"")

    def _next_chunk(self, size: int) -> bytes:
        raise NotImplementedError

    def readinto(self, buffer: Any) -> int:
        view = memoryview(buffer).cast("B")
        if not view:
            return 0
        if not self._pending:
            chunk = self._next_chunk(len(view))
            if not chunk:
                return 0
            if not isinstance(chunk, (bytes, bytearray, memoryview)):
                raise FieldTypeError(
                    f"Payload produced {type(chunk).__name__}, expected bytes"
                )
            self._pending = memoryview(chunk).cast("B")
        n = min(len(view), len(self._pending))
        view[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        self._pending = memoryview(b"")
        close = getattr(self._raw, "close", None)
        if close is not None:
            close()


class _ReadSource(_ChunkSource):
    """Source backed by an object that only offers ``read(size)``."""

    def _next_chunk(self, size: int) -> bytes:
        chunk = self._raw.read(size)
        if chunk is None:
            raise BlockingIOError("Payload is non-blocking and has no data ready")
        return chunk


class _IterSource(_ChunkSource):
    """Source backed by an iterator of byte chunks (e.g. a generator)."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        super().__init__(chunks)
        self._chunks: Iterator[bytes] = iter(chunks)

    def _next_chunk(self, size: int) -> bytes:
        # Empty chunks are not end-of-data for iterators.
        for chunk in self._chunks:
            if chunk:
                return chunk
        return b""


def as_source(payload: Any) -> Any:
    """
    Return an object with ``readinto`` for any supported payload.

    Chunks produced by iterators and read-only objects are checked when
    they are read, so a non-bytes chunk raises FieldTypeError from the
    body read that reaches it.

    Args:
        payload: Binary file object, object with read(), bytes-like, str,
            or iterable of byte chunks

    Returns:
        The payload itself when it already supports readinto, else an adapter

    Raises:
        FieldTypeError: If the payload cannot produce bytes
    """
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return Cursor(bytes(payload))
    if isinstance(payload, str):
        return Cursor(payload.encode("utf-8"))
    if isinstance(payload, io.TextIOBase):
        raise FieldTypeError("Text-mode file objects are not supported; open in binary mode")
    if hasattr(payload, "readinto"):
        return payload
    if hasattr(payload, "read"):
        return _ReadSource(payload)
    if isinstance(payload, Mapping):
        raise FieldTypeError("Mappings are not supported as payloads; pass their encoded bytes")
    if isinstance(payload, Iterable):
        return _IterSource(payload)
    raise FieldTypeError(f"Unsupported payload type: {type(payload).__name__}")


def close_source(source: Any) -> None:
    close = getattr(source, "close", None)
    if close is not None:
        close()
