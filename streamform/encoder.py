from __future__ import annotations

from typing import Any

from .sources import ByteSource, Cursor, close_source

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def delimiter(boundary: str) -> str:
    """Delimiter line that opens every part: CRLF, two dashes, the token."""
    return f"\r\n--{boundary}"


def render_text_field(delim: str, name: str, value: str) -> bytes:
    return (
        f'{delim}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}'.encode()
    )


def render_stream_header(
    delim: str, name: str, filename: str | None, content_type: str
) -> bytes:
    header = f'{delim}\r\nContent-Disposition: form-data; name="{name}"'
    if filename is not None:
        header += f'; filename="{filename}"'
    header += f"\r\nContent-Type: {content_type}\r\n\r\n"
    return header.encode()


class FieldEncoder:
    """
    One stream field: its rendered header followed by its payload.

    Reads are served from the header until it is used up, then passed
    straight through to the payload.
    """

    def __init__(
        self,
        name: str,
        delim: str,
        payload: ByteSource,
        filename: str | None = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        self.name = name
        self.header = Cursor(render_stream_header(delim, name, filename, content_type))
        self.payload = payload

    def readinto(self, buffer: Any) -> int:
        if not self.header.at_end:
            return self.header.readinto(buffer)
        n = self.payload.readinto(buffer)
        if n is None:
            raise BlockingIOError(f"Payload of field {self.name!r} has no data ready")
        return n

    def close(self) -> None:
        close_source(self.payload)

    def __repr__(self) -> str:
        return f"<FieldEncoder {self.name!r}>"
