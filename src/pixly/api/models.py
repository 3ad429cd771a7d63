"""Pydantic request and response models for the Pixly API.

These models are the schema validator for every endpoint.  FastAPI uses them
for request validation, serialisation, and OpenAPI documentation; any
validation failure is reported to the client as a 400 error envelope (see
:mod:`pixly.api.validation`).

Field names are the client-facing camelCase names (``imageLocation``,
``imageUrl``); :data:`pixly.core.sql.IMAGE_COLUMNS` maps them to storage
columns.

Models
------
ImageCreateRequest
    Payload for ``POST /images``.
ImageSearchQuery
    Query parameters for ``GET /images``.  Unknown keys are rejected.
ImageUpdateRequest
    Payload for ``PATCH /images/{id}``.  ``id`` and unknown keys are rejected.
ImageOut, ImageResponse, ImageListResponse, DeletedResponse
    Response bodies.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

_http_url = TypeAdapter(AnyHttpUrl)


def _check_url(value: str | None) -> str | None:
    """Validate *value* as an http(s) URL but keep the client's spelling.

    ``AnyHttpUrl`` normalises its input (lower-cased host, trailing slash), so
    the parsed URL is only used as a check and the original string is stored.
    """
    if value is not None:
        try:
            _http_url.validate_python(value)
        except ValidationError as e:
            raise ValueError("must be a valid http(s) URL") from e
    return value


class ImageCreateRequest(BaseModel):
    """Request body for ``POST /images``.

    Attributes:
        name: Unique display name.
        camera: Camera used to take the image.
        imageLocation: Where the image was taken.
        imageUrl: Absolute http(s) URL of the image file.
        style: Optional style; the database default ``"normal"`` applies
            when omitted.
    """

    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(..., min_length=1, description="Unique image name.")
    camera: StrictStr = Field(..., description="Camera used to take the image.")
    imageLocation: StrictStr = Field(..., description="Where the image was taken.")
    imageUrl: StrictStr = Field(..., description="Absolute http(s) URL of the image.")
    style: StrictStr | None = Field(
        default=None,
        description="Image style; defaults to 'normal' in storage.",
    )

    @field_validator("imageUrl")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        return _check_url(v)

    def to_insert_data(self) -> dict[str, Any]:
        """Return the fields to insert, omitting an unset ``style``."""
        return self.model_dump(exclude_none=True)


class ImageSearchQuery(BaseModel):
    """Query parameters for ``GET /images``.

    Every filter is an optional case-insensitive partial match.  Keys other
    than the four below are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    style: str | None = None
    imageLocation: str | None = None
    camera: str | None = None

    def to_filters(self) -> dict[str, str]:
        """Return only the filters the client supplied with a value."""
        return {key: value for key, value in self.model_dump().items() if value}


class ImageUpdateRequest(BaseModel):
    """Request body for ``PATCH /images/{id}``.

    Any subset of the mutable fields may be supplied.  ``id`` is not a field
    of this model, so an attempt to change it is rejected as an extra key.
    """

    model_config = ConfigDict(extra="forbid")

    name: StrictStr | None = Field(default=None, min_length=1)
    style: StrictStr | None = None
    camera: StrictStr | None = None
    imageLocation: StrictStr | None = None
    imageUrl: StrictStr | None = None

    @field_validator("imageUrl")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        return _check_url(v)

    def to_update_data(self) -> dict[str, Any]:
        """Return only the fields the client explicitly supplied.

        Fields sent as ``null`` are dropped along with unset ones, since every
        column is ``NOT NULL``.
        """
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ImageOut(BaseModel):
    """A stored image record."""

    id: int
    name: str
    camera: str
    style: str
    imageLocation: str
    imageUrl: str


class ImageResponse(BaseModel):
    image: ImageOut


class ImageListResponse(BaseModel):
    images: list[ImageOut]


class DeletedResponse(BaseModel):
    deleted: str
