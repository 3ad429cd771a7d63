"""DDL for the ``images`` table.

The ``UNIQUE`` constraint on ``name`` is the storage-level backstop for the
duplicate-name precheck in :meth:`pixly.core.image_store.ImageStore.add`.
"""

IMAGES_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS images (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    camera TEXT NOT NULL,
    style TEXT NOT NULL DEFAULT 'normal',
    image_location TEXT NOT NULL,
    image_url TEXT NOT NULL
)
"""

# ``id`` is a SERIAL (int4) column; ids outside this range cannot exist.
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1
