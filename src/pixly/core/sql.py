"""Parameterized SQL fragment builders for the ``images`` table.

Both builders turn a sparse mapping of client-facing fields into a SQL
fragment plus an ordered list of values bound to ``$n`` positional
placeholders (the asyncpg parameter style).  Values never appear in the SQL
text; column names only ever come from :data:`IMAGE_COLUMNS`.

Column Registry
---------------
:data:`IMAGE_COLUMNS` maps external (JSON) field names to storage columns::

    name           -> name
    camera         -> camera
    style          -> style
    imageLocation  -> image_location
    imageUrl       -> image_url

Examples
--------
    >>> filter_where_builder({"name": "test"})
    ('WHERE name ILIKE $1', ['%test%'])

    >>> sql_for_partial_update({"imageUrl": "http://a.test"}, IMAGE_COLUMNS)
    ('"image_url"=$1', ['http://a.test'])
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pixly.core.errors import bad_request

IMAGE_COLUMNS: dict[str, str] = {
    "name": "name",
    "camera": "camera",
    "style": "style",
    "imageLocation": "image_location",
    "imageUrl": "image_url",
}

# Filter predicates are emitted in this order; callers and stored fixtures
# depend on the resulting placeholder numbering.
FILTER_FIELDS: tuple[str, ...] = ("style", "name", "imageLocation", "camera")


def filter_where_builder(filters: Mapping[str, str | None] | None) -> tuple[str, list[str]]:
    """Build a conjunctive ``WHERE`` clause of case-insensitive partial matches.

    Only the fields in :data:`FILTER_FIELDS` are considered.  A field that is
    missing, ``None`` or empty contributes nothing.  Each remaining field adds
    ``<column> ILIKE $n`` and the value ``%<value>%``.

    Args:
        filters: Mapping of external field name to search term.

    Returns:
        Tuple ``(where, values)``.  ``where`` is ``""`` when no filter is
        present, otherwise ``"WHERE "`` followed by the predicates joined with
        ``" AND "``.  ``values`` lines up with the placeholder numbers.
    """
    filters = filters or {}
    where_parts: list[str] = []
    values: list[str] = []

    for field in FILTER_FIELDS:
        term = filters.get(field)
        if not term:
            continue
        values.append(f"%{term}%")
        where_parts.append(f"{IMAGE_COLUMNS[field]} ILIKE ${len(values)}")

    where = "WHERE " + " AND ".join(where_parts) if where_parts else ""
    return where, values


def sql_for_partial_update(
    data: Mapping[str, Any],
    js_to_sql: Mapping[str, str] | None = None,
) -> tuple[str, list[Any]]:
    """Build the ``SET`` fragment of a partial ``UPDATE``.

    Only the keys present in *data* are written, so unmentioned columns keep
    their current values.  Placeholders are numbered from ``$1`` in the
    iteration order of *data*; the caller appends any trailing parameters
    (such as the row id) after the returned values.

    Args:
        data: Mapping of external field name to new value.  Must not be
            empty.
        js_to_sql: Optional alias table from external field name to column
            name.  Fields without an alias are used as-is.

    Returns:
        Tuple ``(set_cols, values)``, e.g.
        ``('"name"=$1, "image_url"=$2', ['Aliya', 'http://a.test'])``.

    Raises:
        PixlyError: ``BAD_REQUEST`` if *data* is empty.
    """
    if not data:
        raise bad_request("No data")

    aliases = js_to_sql or {}
    cols = [f'"{aliases.get(key, key)}"=${idx}' for idx, key in enumerate(data, start=1)]

    return ", ".join(cols), list(data.values())
