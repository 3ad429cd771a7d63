"""CRUD operations for image records.

:class:`ImageStore` composes fixed SQL templates with the fragment builders
in :mod:`pixly.core.sql`.  Every method touches at most one row (or reads a
filtered set) and either returns a fully populated record or raises a
:class:`~pixly.core.errors.PixlyError`.

Records are returned as dictionaries keyed by the external field names::

    {"id": 1, "name": "img1", "camera": "Sony", "style": "normal",
     "imageLocation": "San Francisco", "imageUrl": "http://route1.test"}

Duplicate names
---------------
:meth:`ImageStore.add` runs two independent checks.  The precheck query
rejects names that already exist; the ``UNIQUE`` constraint on ``name``
catches a concurrent insert that slips between the precheck and the insert.
Both surface as ``BAD_REQUEST``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import asyncpg

from pixly.core.errors import bad_request, not_found
from pixly.core.schema import ID_MAX, ID_MIN
from pixly.core.sql import IMAGE_COLUMNS, filter_where_builder, sql_for_partial_update

# Column list shared by every SELECT / RETURNING; aliases give external names.
RETURNING_COLUMNS = (
    'id, name, camera, style, image_location AS "imageLocation", image_url AS "imageUrl"'
)


def _check_id(image_id: int) -> None:
    """Raise ``NOT_FOUND`` for ids the int4 ``id`` column cannot hold."""
    if not ID_MIN <= image_id <= ID_MAX:
        raise not_found(f"No image: {image_id}")


class QueryRunner(Protocol):
    """The subset of :class:`pixly.core.database.Database` the store uses."""

    async def fetch(self, query: str, *args: Any) -> list[dict[str, Any]]: ...

    async def fetchrow(self, query: str, *args: Any) -> dict[str, Any] | None: ...


class ImageStore:
    """Single-table record store for image metadata."""

    def __init__(self, db: QueryRunner):
        self.db = db

    async def add(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a new image and return the stored record.

        Args:
            data: ``name``, ``camera``, ``imageLocation`` and ``imageUrl``,
                plus optional ``style``.  When ``style`` is omitted the column
                default (``"normal"``) applies.

        Returns:
            The new record including its generated ``id``.

        Raises:
            PixlyError: ``BAD_REQUEST`` if an image with the same name exists.
        """
        name = data["name"]

        duplicate = await self.db.fetchrow(
            """SELECT name
               FROM images
               WHERE name = $1""",
            name,
        )
        if duplicate:
            raise bad_request(f"Duplicate image: {name}")

        columns = ["name", "camera", "image_url", "image_location"]
        values = [name, data["camera"], data["imageUrl"], data["imageLocation"]]
        if data.get("style") is not None:
            columns.append("style")
            values.append(data["style"])

        placeholders = ", ".join(f"${idx}" for idx in range(1, len(values) + 1))
        query = f"""INSERT INTO images ({", ".join(columns)})
                    VALUES ({placeholders})
                    RETURNING {RETURNING_COLUMNS}"""

        try:
            return await self.db.fetchrow(query, *values)
        except asyncpg.UniqueViolationError as e:
            raise bad_request(f"Duplicate image: {name}") from e

    async def find_all(self, filters: Mapping[str, str | None] | None = None) -> list[dict[str, Any]]:
        """Return all images matching *filters*, ordered by name.

        Args:
            filters: Optional ``name``, ``style``, ``imageLocation`` and
                ``camera`` search terms (case-insensitive partial matches).

        Returns:
            Matching records; an empty list when nothing matches.
        """
        where, values = filter_where_builder(filters)

        query = f"""SELECT {RETURNING_COLUMNS}
                    FROM images {where}
                    ORDER BY name"""
        return await self.db.fetch(query, *values)

    async def get(self, image_id: int) -> dict[str, Any]:
        """Return the image with *image_id*.

        Raises:
            PixlyError: ``NOT_FOUND`` if there is no such image.
        """
        _check_id(image_id)
        image = await self.db.fetchrow(
            f"""SELECT {RETURNING_COLUMNS}
                FROM images
                WHERE id = $1""",
            image_id,
        )
        if not image:
            raise not_found(f"No image: {image_id}")
        return image

    async def update(self, image_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """Partially update an image; only the supplied fields change.

        Args:
            image_id: Primary key of the image.
            data: Subset of ``name``, ``style``, ``camera``,
                ``imageLocation`` and ``imageUrl``.

        Returns:
            The updated record.

        Raises:
            PixlyError: ``BAD_REQUEST`` if *data* is empty, names an unknown
                field, or renames the image onto an existing name;
                ``NOT_FOUND`` if there is no such image.
        """
        unknown = [key for key in data if key not in IMAGE_COLUMNS]
        if unknown:
            raise bad_request(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        set_cols, values = sql_for_partial_update(data, IMAGE_COLUMNS)
        _check_id(image_id)
        id_idx = f"${len(values) + 1}"

        query = f"""UPDATE images
                    SET {set_cols}
                    WHERE id = {id_idx}
                    RETURNING {RETURNING_COLUMNS}"""

        try:
            image = await self.db.fetchrow(query, *values, image_id)
        except asyncpg.UniqueViolationError as e:
            raise bad_request(f"Duplicate image: {data.get('name')}") from e

        if not image:
            raise not_found(f"No image: {image_id}")
        return image

    async def remove(self, image_id: int) -> None:
        """Delete the image with *image_id*.

        Raises:
            PixlyError: ``NOT_FOUND`` if there is no such image.
        """
        _check_id(image_id)
        deleted = await self.db.fetchrow(
            """DELETE
               FROM images
               WHERE id = $1
               RETURNING id""",
            image_id,
        )
        if not deleted:
            raise not_found(f"No image: {image_id}")
