"""Pixly - image catalog record store with a FastAPI REST API."""

__version__ = "0.1.0"

from pixly.core.config import PixlyConfig, config
from pixly.core.errors import ErrorKind, PixlyError

__all__ = [
    "ErrorKind",
    "PixlyError",
    "PixlyConfig",
    "config",
]
