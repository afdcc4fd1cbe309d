"""Errors that abort a visual regression run."""

from __future__ import annotations

from pathlib import Path


class VisregError(Exception):
    """Base class for unrecoverable pipeline errors."""


class ConfigError(VisregError):
    """Invalid configuration, raised before any comparison work starts."""


class ImageDecodeError(VisregError):
    """An image file exists but cannot be decoded as a raster."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Cannot decode image: {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidImageNameError(VisregError):
    """A file name does not follow the ``<key>__<width>.<ext>`` convention."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Invalid screenshot file name '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
