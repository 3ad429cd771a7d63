"""Pixly: FastAPI REST API layer.

This package contains the FastAPI application, the Pydantic request/response
models, and the translation of validation failures into Pixly errors.

Modules
-------
main
    FastAPI application with the ``/images`` route handlers, error envelope
    handlers, and the ``main()`` CLI entry point.
models
    Pydantic models for API request and response validation.
validation
    Conversion of pydantic validation errors into ``BAD_REQUEST`` errors.
"""
