"""Boundary token generation."""

from __future__ import annotations

import secrets
import string
from collections.abc import Callable

from .errors import BoundaryError

BOUNDARY_LENGTH = 16
BOUNDARY_ALPHABET = string.ascii_letters + string.digits

BoundarySource = Callable[[int], str]


def random_boundary(length: int = BOUNDARY_LENGTH) -> str:
    """Return `length` random alphanumeric characters."""
    return "".join(secrets.choice(BOUNDARY_ALPHABET) for _ in range(length))


def make_boundary(source: BoundarySource | None = None) -> str:
    """
    Draw a token from `source` and check it can be used unquoted.

    Args:
        source: Callable taking the wanted length (default: random_boundary)

    Raises:
        BoundaryError: If the token has the wrong length or non-alphanumeric characters
    """
    token = (source or random_boundary)(BOUNDARY_LENGTH)
    if not isinstance(token, str):
        raise BoundaryError(f"Boundary source returned {type(token).__name__}, expected str")
    if len(token) != BOUNDARY_LENGTH:
        raise BoundaryError(
            f"Boundary must be {BOUNDARY_LENGTH} characters, got {len(token)}"
        )
    if any(ch not in BOUNDARY_ALPHABET for ch in token):
        raise BoundaryError(f"Boundary must be alphanumeric: {token!r}")
    return token
