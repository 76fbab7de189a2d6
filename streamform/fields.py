from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from .boundary import BoundarySource, make_boundary
from .encoder import (
    DEFAULT_CONTENT_TYPE,
    FieldEncoder,
    delimiter,
    render_text_field,
)
from .errors import FieldTypeError
from .reader import BodyReader
from .sources import as_source

logger = logging.getLogger(__name__)


class TextContent:
    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"<TextContent {self.value!r}>"


class StreamContent:
    __slots__ = ("payload", "filename", "content_type")

    def __init__(self, payload: Any, filename: str | None, content_type: str) -> None:
        self.payload = payload
        self.filename = filename
        self.content_type = content_type

    def __repr__(self) -> str:
        return f"<StreamContent filename={self.filename!r} type={self.content_type}>"


class Field:
    __slots__ = ("name", "content")

    def __init__(self, name: str, content: TextContent | StreamContent) -> None:
        self.name = name
        self.content = content

    def __repr__(self) -> str:
        return f"<Field {self.name!r} {self.content!r}>"


class FieldSet:
    """
    Ordered collection of form fields waiting to be encoded.

    Fields appear in the body in the order they were added, text fields
    first. Names are not checked; repeating a name adds another part.

    Args:
        boundary_source: Callable returning N alphanumeric characters for a
            given N (default: cryptographically random)
        legacy_stream_order: Emit stream fields last-added first, as older
            encoders did (default: False)
    """

    def __init__(
        self,
        boundary_source: BoundarySource | None = None,
        legacy_stream_order: bool = False,
    ) -> None:
        self.boundary_source = boundary_source
        self.legacy_stream_order = legacy_stream_order
        self._fields: list[Field] = []

    def add_text(self, name: str, value: str) -> None:
        if not isinstance(value, str):
            raise FieldTypeError(
                f"Text field {name!r} needs a str value, got {type(value).__name__}"
            )
        self._fields.append(Field(name, TextContent(value)))

    def add_stream(
        self,
        name: str,
        payload: Any,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> None:
        """
        Add a field whose content is read lazily from `payload`.

        The set takes ownership of the payload: it is read during encoding
        and closed once exhausted or when the prepared body is closed.

        Args:
            name: Field name
            payload: Binary file object, object with read(), bytes-like, str,
                or iterable of byte chunks
            filename: Filename reported to the server, omitted when None
            content_type: MIME type (default: application/octet-stream)
        """
        source = as_source(payload)
        self._fields.append(
            Field(name, StreamContent(source, filename, content_type or DEFAULT_CONTENT_TYPE))
        )

    def prepare(self) -> BodyReader:
        """
        Turn the collected fields into a readable body.

        Text fields are rendered immediately; stream payloads are not touched.
        The set is emptied and can be filled again afterwards.
        """
        boundary = make_boundary(self.boundary_source)
        delim = delimiter(boundary)

        text_parts: list[bytes] = []
        streams: list[FieldEncoder] = []
        fields, self._fields = self._fields, []
        for field in fields:
            content = field.content
            if isinstance(content, TextContent):
                text_parts.append(render_text_field(delim, field.name, content.value))
            else:
                streams.append(
                    FieldEncoder(
                        field.name,
                        delim,
                        content.payload,
                        filename=content.filename,
                        content_type=content.content_type,
                    )
                )

        # No fields at all gives an empty body, not a bare closing delimiter.
        tail = f"{delim}--".encode() if text_parts or streams else b""
        logger.debug(
            "Prepared body %s: %d text field(s), %d stream field(s)",
            boundary,
            len(text_parts),
            len(streams),
        )
        return BodyReader(
            boundary,
            b"".join(text_parts),
            streams,
            tail,
            legacy_stream_order=self.legacy_stream_order,
        )

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"<FieldSet {len(self._fields)} field(s)>"
