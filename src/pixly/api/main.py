"""Pixly Image Catalog: FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the ``/images`` REST routes, the error
envelope handlers, and the ``main()`` CLI function that launches uvicorn.

Architecture
------------
- **Configuration** comes from :data:`pixly.core.config.config`
  (``PIXLY_*`` environment variables).
- **Persistence** is an asyncpg pool wrapped by
  :class:`~pixly.core.database.Database`; the lifespan handler opens it,
  creates the ``images`` table if needed, and stores an
  :class:`~pixly.core.image_store.ImageStore` on ``app.state``.
- **Validation** is done by the Pydantic models in :mod:`pixly.api.models`.
- **Errors** raised by the core carry an
  :class:`~pixly.core.errors.ErrorKind`; this module is the only place that
  maps kinds to HTTP status codes.  Every error response has the shape
  ``{"error": {"message": ..., "status": ...}}``.

Endpoints
---------
========  ====================  =======================================
Method    Path                  Purpose
========  ====================  =======================================
GET       ``/images``           List images, optionally filtered
GET       ``/images/{id}``      Single image
POST      ``/images``           Create an image (201)
PATCH     ``/images/{id}``      Partially update an image
DELETE    ``/images/{id}``      Delete an image
========  ====================  =======================================

Usage
-----
CLI (installed entry point)::

    pixly

Direct invocation::

    python -m pixly.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pixly import __version__
from pixly.api.models import (
    DeletedResponse,
    ImageCreateRequest,
    ImageListResponse,
    ImageResponse,
    ImageSearchQuery,
    ImageUpdateRequest,
)
from pixly.api.validation import validation_error
from pixly.core.config import config
from pixly.core.database import Database
from pixly.core.errors import ErrorKind, PixlyError
from pixly.core.image_store import ImageStore

logger = logging.getLogger(__name__)

_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def status_for_kind(kind: ErrorKind) -> int:
    """Return the HTTP status code for an error kind (500 if unmapped)."""
    return _KIND_STATUS.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_envelope(
    message: str | list[str],
    status_code: int,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error body shared by every failure response."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Application lifecycle: connection pool setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Opens the connection pool, makes sure the ``images`` table exists,
        and stores the :class:`ImageStore` on ``app.state``.

    On shutdown:
        Closes the connection pool.  The pool is also closed if startup
        fails after connecting.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    db = Database.from_config(config)
    await db.connect()
    try:
        await db.ensure_schema()
        app.state.database = db
        app.state.image_store = ImageStore(db)
        logger.info(f"Pixly {__version__} connected to database ({config.env}).")

        yield
    finally:
        await db.close()
        logger.info("Database pool closed on shutdown.")


app = FastAPI(
    title="Pixly",
    description="Image catalog record store.",
    version=__version__,
    lifespan=lifespan,
)


def get_image_store(request: Request) -> ImageStore:
    """Dependency returning the process-wide :class:`ImageStore`."""
    return request.app.state.image_store


StoreDep = Annotated[ImageStore, Depends(get_image_store)]


# ---------------------------------------------------------------------------
# Error handlers.
# ---------------------------------------------------------------------------


@app.exception_handler(PixlyError)
async def handle_pixly_error(request: Request, exc: PixlyError) -> JSONResponse:
    """Map a tagged core error to its HTTP status and the error envelope.

    Validation failures carry a list of per-field messages, which is sent as
    the ``message`` so clients see every problem at once.
    """
    status_code = status_for_kind(exc.kind)
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return error_envelope(exc.errors or exc.message, status_code)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report schema validation failures as 400 Bad Request."""
    return await handle_pixly_error(request, validation_error(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap routing errors (unmatched path, wrong method) in the envelope.

    Headers such as ``Allow`` on a 405 are passed through.
    """
    return error_envelope(exc.detail, exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the stack trace and answer 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_envelope(str(exc) or "Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/images", response_model=ImageListResponse)
async def list_images(
    store: StoreDep,
    filters: Annotated[ImageSearchQuery, Query()],
) -> dict:
    """Return all images, optionally filtered.

    Filters (all optional, case-insensitive partial matches): ``name``,
    ``style``, ``imageLocation``, ``camera``.  Any other query key is a 400.

    Returns:
        ``{"images": [...]}`` ordered by name.
    """
    images = await store.find_all(filters.to_filters())
    return {"images": images}


@app.get("/images/{image_id}", response_model=ImageResponse)
async def get_image(image_id: int, store: StoreDep) -> dict:
    """Return a single image.

    Raises:
        PixlyError: ``NOT_FOUND`` (404) if the image does not exist.
    """
    image = await store.get(image_id)
    return {"image": image}


@app.post("/images", response_model=ImageResponse, status_code=status.HTTP_201_CREATED)
async def create_image(req: ImageCreateRequest, store: StoreDep) -> dict:
    """Create an image record.

    Raises:
        PixlyError: ``BAD_REQUEST`` (400) if the name is already taken.
    """
    image = await store.add(req.to_insert_data())
    return {"image": image}


@app.patch("/images/{image_id}", response_model=ImageResponse)
async def update_image(image_id: int, req: ImageUpdateRequest, store: StoreDep) -> dict:
    """Partially update an image; unmentioned fields keep their values.

    Raises:
        PixlyError: ``BAD_REQUEST`` (400) for an empty body,
            ``NOT_FOUND`` (404) if the image does not exist.
    """
    image = await store.update(image_id, req.to_update_data())
    return {"image": image}


@app.delete("/images/{image_id}", response_model=DeletedResponse)
async def delete_image(image_id: int, store: StoreDep) -> dict:
    """Delete an image.

    Returns:
        ``{"deleted": "<id>"}``.

    Raises:
        PixlyError: ``NOT_FOUND`` (404) if the image does not exist.
    """
    await store.remove(image_id)
    return {"deleted": str(image_id)}


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Configure logging and launch the uvicorn ASGI server.

    Host and port come from :data:`~pixly.core.config.config`
    (``PIXLY_SERVER_HOST`` / ``PIXLY_SERVER_PORT``, default ``0.0.0.0:3001``).
    Registered as the ``pixly`` console script in ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "pixly.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
