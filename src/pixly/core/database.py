"""Async PostgreSQL access via an asyncpg connection pool.

:class:`Database` is deliberately thin: it owns the pool, hands out
connections, and converts ``asyncpg.Record`` rows into plain dictionaries so
callers never depend on driver types.  Queries use asyncpg's ``$n``
positional placeholders.

Lifecycle
---------
The FastAPI lifespan creates one :class:`Database` per process, calls
:meth:`Database.connect` on startup and :meth:`Database.close` on shutdown::

    db = Database(config.get_database_uri(), min_size=1, max_size=10)
    await db.connect()
    rows = await db.fetch("SELECT id, name FROM images")
    await db.close()
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from pixly.core.config import PixlyConfig
from pixly.core.schema import IMAGES_TABLE_DDL

logger = logging.getLogger(__name__)


class Database:
    """Connection pool wrapper exposing dict-returning query helpers."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 60.0,
    ):
        """Initialise without connecting.

        Args:
            dsn: asyncpg DSN (URL or bare database name).
            min_size: Minimum number of pooled connections.
            max_size: Maximum number of pooled connections.
            command_timeout: Default statement timeout in seconds.
        """
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_config(cls, cfg: PixlyConfig) -> Database:
        """Build a :class:`Database` from the application configuration."""
        return cls(
            cfg.get_database_uri(),
            min_size=cfg.db_min_pool_size,
            max_size=cfg.db_max_pool_size,
            command_timeout=cfg.db_command_timeout,
        )

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """Create the connection pool.  Safe to call more than once."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            self.dsn,
            min_size=self.min_size,
            max_size=self.max_size,
            command_timeout=self.command_timeout,
        )
        logger.info(f"Database pool created (min={self.min_size}, max={self.max_size})")

    async def close(self) -> None:
        """Close the pool if it is open."""
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection from the pool.

        Raises:
            RuntimeError: If :meth:`connect` has not been called.
        """
        if self._pool is None:
            raise RuntimeError("Database is not connected; call connect() first")
        async with self._pool.acquire() as connection:
            yield connection

    async def fetch(self, query: str, *args: Any) -> list[dict[str, Any]]:
        """Run *query* and return every row as a dictionary."""
        async with self.acquire() as conn:
            rows = await conn.fetch(query, *args)
        logger.debug(f"fetch: {query.strip()[:100]} | rows={len(rows)}")
        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Run *query* and return the first row, or ``None`` if there is none."""
        async with self.acquire() as conn:
            row = await conn.fetchrow(query, *args)
        logger.debug(f"fetchrow: {query.strip()[:100]} | found={row is not None}")
        return dict(row) if row is not None else None

    async def execute(self, query: str, *args: Any) -> str:
        """Run a statement that returns no rows; returns the status tag."""
        async with self.acquire() as conn:
            status = await conn.execute(query, *args)
        logger.debug(f"execute: {query.strip()[:100]} | {status}")
        return status

    async def ensure_schema(self) -> None:
        """Create the ``images`` table if it does not exist."""
        await self.execute(IMAGES_TABLE_DDL)
