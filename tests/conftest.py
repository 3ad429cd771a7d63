"""Shared pytest fixtures for Pixly tests."""

from collections.abc import Generator, Mapping
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pixly.api.main import app, get_image_store
from pixly.core.config import PixlyConfig
from pixly.core.errors import bad_request, not_found
from pixly.core.sql import FILTER_FIELDS, sql_for_partial_update


class InMemoryImageStore:
    """Dict-backed stand-in for :class:`pixly.core.image_store.ImageStore`.

    Mirrors the real store's contract (ordering, defaults, error kinds) so the
    HTTP layer can be exercised without PostgreSQL.
    """

    def __init__(self):
        self.rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1

    async def add(self, data: Mapping[str, Any]) -> dict[str, Any]:
        if any(row["name"] == data["name"] for row in self.rows.values()):
            raise bad_request(f"Duplicate image: {data['name']}")
        image = {
            "id": self._next_id,
            "name": data["name"],
            "camera": data["camera"],
            "style": data.get("style", "normal"),
            "imageLocation": data["imageLocation"],
            "imageUrl": data["imageUrl"],
        }
        self.rows[self._next_id] = image
        self._next_id += 1
        return dict(image)

    async def find_all(self, filters: Mapping[str, str | None] | None = None) -> list[dict[str, Any]]:
        filters = filters or {}
        matches = []
        for row in self.rows.values():
            if all(
                filters[field].lower() in row[field].lower()
                for field in FILTER_FIELDS
                if filters.get(field)
            ):
                matches.append(dict(row))
        return sorted(matches, key=lambda row: row["name"])

    async def get(self, image_id: int) -> dict[str, Any]:
        if image_id not in self.rows:
            raise not_found(f"No image: {image_id}")
        return dict(self.rows[image_id])

    async def update(self, image_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        sql_for_partial_update(data)
        if image_id not in self.rows:
            raise not_found(f"No image: {image_id}")
        self.rows[image_id].update(data)
        return dict(self.rows[image_id])

    async def remove(self, image_id: int) -> None:
        if self.rows.pop(image_id, None) is None:
            raise not_found(f"No image: {image_id}")


@pytest.fixture
def test_config(monkeypatch) -> PixlyConfig:
    """Create a test configuration isolated from the developer's environment.

    Returns:
        PixlyConfig instance with ``env="test"`` and no ``.env`` file.
    """
    for name in ("PIXLY_ENV", "PIXLY_DATABASE_URL", "PIXLY_SERVER_PORT"):
        monkeypatch.delenv(name, raising=False)
    return PixlyConfig(env="test", _env_file=None)


@pytest.fixture
def mock_db() -> AsyncMock:
    """A database double exposing ``fetch`` and ``fetchrow`` as AsyncMocks."""
    db = AsyncMock()
    db.fetch.return_value = []
    db.fetchrow.return_value = None
    return db


@pytest.fixture
def memory_store() -> InMemoryImageStore:
    """In-memory store seeded with three images (ids 1-3)."""
    store = InMemoryImageStore()
    for name, camera, location, url in [
        ("img1", "Sony", "San Francisco", "http://route1.test"),
        ("img2", "Nikon", "Los Angeles", "http://route2.test"),
        ("img3", "Canon", "New York", "http://route3.test"),
    ]:
        store.rows[store._next_id] = {
            "id": store._next_id,
            "name": name,
            "camera": camera,
            "style": "normal",
            "imageLocation": location,
            "imageUrl": url,
        }
        store._next_id += 1
    return store


@pytest.fixture
def test_client(memory_store: InMemoryImageStore) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the in-memory store.

    The client is not used as a context manager, so the lifespan handler (and
    its database connection) never runs.
    """
    app.dependency_overrides[get_image_store] = lambda: memory_store
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
