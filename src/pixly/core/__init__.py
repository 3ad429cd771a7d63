"""Core functionality for the Pixly image catalog.

Architecture Overview
---------------------
The core module follows a layered architecture:

1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with PIXLY_ in .env files

2. **Query Construction Layer** (sql.py):
   - Column registry mapping external field names to storage columns
   - Dynamic ``WHERE`` filter and partial ``SET`` update builders

3. **Persistence Layer** (database.py, schema.py, image_store.py):
   - asyncpg connection pool wrapper
   - ``images`` table DDL
   - CRUD record store composing the builders with fixed SQL templates

4. **Errors** (errors.py):
   - ``PixlyError`` tagged with an ``ErrorKind`` (bad request / not found)

Usage Example
-------------
    from pixly.core import Database, ImageStore, config

    db = Database.from_config(config)
    await db.connect()
    store = ImageStore(db)
    images = await store.find_all({"camera": "leica"})
"""

from pixly.core.config import PixlyConfig, config
from pixly.core.database import Database
from pixly.core.errors import ErrorKind, PixlyError, bad_request, not_found
from pixly.core.image_store import ImageStore
from pixly.core.sql import IMAGE_COLUMNS, filter_where_builder, sql_for_partial_update

__all__ = [
    "Database",
    "ErrorKind",
    "IMAGE_COLUMNS",
    "ImageStore",
    "PixlyConfig",
    "PixlyError",
    "bad_request",
    "config",
    "filter_where_builder",
    "not_found",
    "sql_for_partial_update",
]
