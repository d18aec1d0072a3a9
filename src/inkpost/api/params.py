"""Shared path-parameter parsing."""

from inkpost.errors import InvalidIdentifierError


def parse_id(raw: str, what: str) -> int:
    """Parse a positive integer id from a path segment."""
    if not raw.isascii() or not raw.isdigit() or int(raw) <= 0:
        raise InvalidIdentifierError(f"Invalid {what} ID")
    return int(raw)
