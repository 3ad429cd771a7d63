"""Error kinds raised by the Pixly core.

The core reports failures as a single exception type tagged with an
:class:`ErrorKind` rather than through an exception hierarchy.  Translating
a kind into an HTTP status is the API layer's job (see
:func:`pixly.api.main.status_for_kind`), so nothing in this module knows
about transports.

Kinds
-----
BAD_REQUEST
    The caller supplied invalid data or broke a business rule (duplicate
    name, empty partial update, schema-invalid payload).
NOT_FOUND
    The referenced record does not exist.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of a recoverable, caller-visible failure."""

    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"


class PixlyError(Exception):
    """A caller-visible failure tagged with its :class:`ErrorKind`.

    Attributes:
        kind: What went wrong, independent of transport.
        message: Human-readable summary.
        errors: Optional list of detailed messages (used for schema
            validation failures, one entry per offending field).
    """

    def __init__(self, kind: ErrorKind, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors = list(errors) if errors else []

    def __repr__(self) -> str:
        return f"PixlyError(kind={self.kind.value!r}, message={self.message!r})"


def bad_request(message: str = "Bad Request", errors: list[str] | None = None) -> PixlyError:
    """Build a :data:`ErrorKind.BAD_REQUEST` error."""
    return PixlyError(ErrorKind.BAD_REQUEST, message, errors)


def not_found(message: str = "Not Found") -> PixlyError:
    """Build a :data:`ErrorKind.NOT_FOUND` error."""
    return PixlyError(ErrorKind.NOT_FOUND, message)
