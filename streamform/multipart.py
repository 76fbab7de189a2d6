from __future__ import annotations

from typing import Any

from .boundary import BoundarySource
from .fields import FieldSet
from .reader import BodyReader


def build_multipart(
    data: dict[str, str] | None,
    files: dict[str, Any] | None,
    *,
    boundary_source: BoundarySource | None = None,
    legacy_stream_order: bool = False,
) -> tuple[str, BodyReader]:
    """
    Build a streaming multipart/form-data body.
    `files` values can be a payload or (filename, payload, content_type|None).
    A bare payload is sent with the field name as filename.
    """
    form = FieldSet(
        boundary_source=boundary_source, legacy_stream_order=legacy_stream_order
    )
    if data:
        for k, v in data.items():
            form.add_text(k, v)
    for field, val in (files or {}).items():
        if isinstance(val, tuple):
            filename, payload, ctype = val
            form.add_stream(field, payload, filename=filename, content_type=ctype)
        else:
            form.add_stream(field, val, filename=field)
    body = form.prepare()
    return body.content_type, body
