"""Bring two screenshots onto a common canvas before diffing.

Full-page captures routinely differ in height between runs. The smaller
image is copied into the top-left corner of an opaque white canvas, so
content added in the new region still shows up as a difference against
white instead of shifting every row.
"""

from __future__ import annotations

from visreg.models.raster import CHANNELS, RasterImage

PAD_COLOR = (255, 255, 255, 255)


def pad_to(image: RasterImage, width: int, height: int) -> RasterImage:
    """Place ``image`` at the top-left of a white ``width`` x ``height`` canvas."""
    if image.size == (width, height):
        return image
    if width < image.width or height < image.height:
        raise ValueError(
            f"Cannot pad {image.width}x{image.height} down to {width}x{height}"
        )

    canvas = bytearray(bytes(PAD_COLOR) * (width * height))
    stride = width * CHANNELS
    src_stride = image.width * CHANNELS
    for y in range(image.height):
        start = y * stride
        canvas[start:start + src_stride] = image.row(y)
    return RasterImage(width, height, bytes(canvas))


def reconcile(a: RasterImage, b: RasterImage) -> tuple[RasterImage, RasterImage]:
    """Return both images padded to max(width) x max(height)."""
    width = max(a.width, b.width)
    height = max(a.height, b.height)
    return pad_to(a, width, height), pad_to(b, width, height)
