"""Translate schema validation failures into Pixly errors.

FastAPI raises :class:`fastapi.exceptions.RequestValidationError` when a
request body, path or query parameter does not match its model.  The API
layer turns that into a ``BAD_REQUEST`` :class:`~pixly.core.errors.PixlyError`
whose ``errors`` list holds one readable line per problem, e.g.::

    body.imageUrl: Value error, must be a valid http(s) URL
    query.nope: Extra inputs are not permitted
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pixly.core.errors import PixlyError, bad_request


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """Render pydantic error dictionaries as ``"<location>: <message>"`` lines."""
    messages = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ()))
        msg = error.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


def validation_error(errors: Iterable[Mapping[str, Any]]) -> PixlyError:
    """Build the ``BAD_REQUEST`` error reported for an invalid request."""
    return bad_request("Invalid request", format_validation_errors(errors))
