from __future__ import annotations

import asyncio
import io
import logging
from collections import deque
from collections.abc import AsyncIterator, Iterable, Iterator
from typing import Any

from .encoder import FieldEncoder
from .sources import Cursor

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192


class BodyReader(io.RawIOBase):
    """
    Prepared multipart/form-data body, read lazily.

    The body is three segments consumed in order: the rendered text fields,
    the queued stream fields, and the closing delimiter. Stream payloads are
    only read when the caller asks for bytes, so memory stays bounded by the
    caller's buffer plus the rendered headers.

    Once the closing delimiter has been read every further read returns no
    data. An OSError raised by a payload propagates as-is; when bytes were
    already placed in the buffer during that call, the call returns them
    first and the error surfaces on the next read. A BlockingIOError can
    therefore be retried without losing or repeating bytes.

    Args:
        boundary: Token shared by every part of this body
        text_block: All text fields, rendered
        streams: Stream fields in registration order
        tail: Closing delimiter, empty for a body without fields
        legacy_stream_order: Serve stream fields last-registered first
    """

    def __init__(
        self,
        boundary: str,
        text_block: bytes,
        streams: Iterable[FieldEncoder],
        tail: bytes,
        legacy_stream_order: bool = False,
    ) -> None:
        self._streams: deque[FieldEncoder] = deque(streams)
        super().__init__()
        self._boundary = boundary
        self._text = Cursor(text_block)
        self._tail = Cursor(tail)
        self._lifo = legacy_stream_order

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        """Value for the request's Content-Type header."""
        return f"multipart/form-data; boundary={self._boundary}"

    @property
    def exhausted(self) -> bool:
        return self._tail.at_end

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed body")
        view = memoryview(buffer).cast("B")
        if not view:
            return 0

        total = 0
        while total < len(view) and not self._tail.at_end:
            dest = view[total:]
            if not self._text.at_end:
                total += self._text.readinto(dest)
            elif self._streams:
                field = self._streams[-1] if self._lifo else self._streams[0]
                try:
                    n = field.readinto(dest)
                except OSError:
                    # Report what is already in the buffer; the next call
                    # reaches the failing payload again.
                    if total:
                        return total
                    raise
                if not n:
                    self._finish(field)
                    continue
                total += n
            else:
                total += self._tail.readinto(dest)
        return total

    def _finish(self, field: FieldEncoder) -> None:
        if self._lifo:
            self._streams.pop()
        else:
            self._streams.popleft()
        logger.debug("Stream field %r exhausted, %d left", field.name, len(self._streams))
        field.close()

    def iter_bytes(self, chunk_size: int | None = None) -> Iterator[bytes]:
        """
        Iterate over the body in chunks.

        Args:
            chunk_size: Maximum chunk size (default: 8192)

        Yields:
            Non-empty byte chunks until the body is exhausted
        """
        size = chunk_size or DEFAULT_CHUNK_SIZE
        while True:
            chunk = self.read(size)
            if not chunk:
                return
            yield chunk

    async def aiter_bytes(self, chunk_size: int | None = None) -> AsyncIterator[bytes]:
        """
        Async variant of iter_bytes().

        Each read runs in a worker thread so blocking payloads (files,
        sockets) do not stall the event loop.
        """
        size = chunk_size or DEFAULT_CHUNK_SIZE
        while True:
            chunk = await asyncio.to_thread(self.read, size)
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        """Close the body and every payload it still owns."""
        if self.closed:
            return
        while self._streams:
            self._streams.popleft().close()
        logger.debug("Body %s closed", self._boundary)
        super().close()

    def __repr__(self) -> str:
        state = "exhausted" if self._tail.at_end else "pending"
        return f"<BodyReader boundary={self._boundary} {state}>"
