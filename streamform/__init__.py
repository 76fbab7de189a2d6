from streamform.fields import Field, FieldSet, StreamContent, TextContent
from streamform.encoder import FieldEncoder, DEFAULT_CONTENT_TYPE
from streamform.reader import BodyReader, DEFAULT_CHUNK_SIZE
from streamform.boundary import BOUNDARY_LENGTH, random_boundary
from streamform.multipart import build_multipart
from streamform.errors import StreamFormError, FieldTypeError, BoundaryError

__all__ = [
    "Field",
    "FieldSet",
    "StreamContent",
    "TextContent",
    "FieldEncoder",
    "DEFAULT_CONTENT_TYPE",
    "BodyReader",
    "DEFAULT_CHUNK_SIZE",
    "BOUNDARY_LENGTH",
    "random_boundary",
    "build_multipart",
    "StreamFormError",
    "FieldTypeError",
    "BoundaryError",
]
