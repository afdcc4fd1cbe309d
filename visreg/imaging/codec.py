"""Encoded image file <-> RasterImage conversion, backed by Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from visreg.errors import ImageDecodeError
from visreg.models.raster import RasterImage

logger = logging.getLogger(__name__)


def load_image(path: str | Path) -> RasterImage:
    """Decode an image file into an RGBA raster.

    A missing file raises FileNotFoundError; anything that exists but does
    not decode raises ImageDecodeError.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    try:
        with Image.open(path) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(path, str(e)) from e
    logger.debug("Loaded %s (%dx%d)", path, rgba.width, rgba.height)
    return RasterImage(rgba.width, rgba.height, rgba.tobytes())


def save_image(image: RasterImage, path: str | Path) -> Path:
    """Encode a raster to disk; the format follows the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.frombytes("RGBA", image.size, image.data).save(path)
    return path
