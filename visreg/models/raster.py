"""In-memory raster image."""

from __future__ import annotations

from dataclasses import dataclass

CHANNELS = 4  # R, G, B, A


@dataclass(frozen=True)
class RasterImage:
    """RGBA pixels, row-major, top-to-bottom."""

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Negative raster size: {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel buffer has {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}"
            )

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "RasterImage":
        """Create a raster where every pixel has the same RGBA value."""
        return cls(width, height, bytes(rgba) * (width * height))

    def row(self, y: int) -> bytes:
        stride = self.width * CHANNELS
        return self.data[y * stride:(y + 1) * stride]
