class StreamFormError(Exception):
    """Base error for streamform."""


class FieldTypeError(StreamFormError, TypeError):
    """Raised when a field value or payload has an unsupported type."""


class BoundaryError(StreamFormError, ValueError):
    """Raised when a boundary source returns an unusable token."""
