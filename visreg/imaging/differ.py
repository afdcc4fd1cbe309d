"""Perceptual pixel diff on top of pixelmatch."""

from __future__ import annotations

from dataclasses import dataclass

from pixelmatch import pixelmatch

from visreg.models.raster import RasterImage

PERCENT_DECIMALS = 3


@dataclass(frozen=True)
class DiffOutcome:
    mismatch_pixels: int
    diff_image: RasterImage

    @property
    def mismatch_percent(self) -> float:
        return mismatch_percent(self.mismatch_pixels, self.diff_image.width, self.diff_image.height)


def mismatch_percent(mismatch_pixels: int, width: int, height: int) -> float:
    """Share of mismatched pixels on the canvas, as a percentage rounded to 3 places."""
    total = width * height
    if total == 0:
        return 0.0
    return round(mismatch_pixels / total * 100, PERCENT_DECIMALS)


def diff_images(
    baseline: RasterImage,
    current: RasterImage,
    threshold: float = 0.1,
    alpha: float = 0.5,
    include_aa: bool = True,
) -> DiffOutcome:
    """Count perceptually different pixels and draw a diff image.

    Both images must already share the same dimensions (see
    ``visreg.imaging.reconciler.reconcile``). Matching pixels are drawn as
    faded greyscale of the baseline, mismatches in red.
    """
    if baseline.size != current.size:
        raise ValueError(
            f"Image sizes differ: {baseline.width}x{baseline.height} "
            f"vs {current.width}x{current.height}"
        )

    output = bytearray(len(baseline.data))
    mismatch = pixelmatch(
        baseline.data,
        current.data,
        baseline.width,
        baseline.height,
        output,
        threshold=threshold,
        includeAA=include_aa,
        alpha=alpha,
    )
    return DiffOutcome(
        mismatch_pixels=mismatch,
        diff_image=RasterImage(baseline.width, baseline.height, bytes(output)),
    )
