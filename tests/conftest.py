"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
from PIL import Image

from visreg.models.comparison import ComparisonResult
from visreg.models.config import VisregConfig
from visreg.models.raster import RasterImage

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


# ============================================================================
# Image Helpers
# ============================================================================


def write_png(
    path: Path,
    width: int,
    height: int,
    color: tuple[int, int, int, int] = WHITE,
    boxes: list[tuple[tuple[int, int, int, int], tuple[int, int, int, int]]] | None = None,
) -> Path:
    """Write a solid-colour PNG, optionally with filled (box, colour) rectangles."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGBA", (width, height), color)
    for box, box_color in boxes or []:
        img.paste(box_color, box)
    img.save(path)
    return path


def solid(width: int, height: int, color: tuple[int, int, int, int] = WHITE) -> RasterImage:
    return RasterImage.filled(width, height, color)


def pixel(image: RasterImage, x: int, y: int) -> tuple[int, ...]:
    i = (y * image.width + x) * 4
    return tuple(image.data[i:i + 4])


def make_result(key: str = "home", width: int = 375, percent: float = 0.0, **kwargs) -> ComparisonResult:
    defaults = {
        "key": key,
        "width": width,
        "canvas_width": width,
        "canvas_height": 100,
        "mismatch_pixel_count": round(percent * width),
        "mismatch_percent": percent,
    }
    defaults.update(kwargs)
    return ComparisonResult(**defaults)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config() -> VisregConfig:
    """Default configuration with the two standard viewport widths."""
    return VisregConfig(widths=[375, 1400], project="acme")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An empty project directory laid out with the default paths."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def baselines_dir(project_root: Path, config: VisregConfig) -> Path:
    path = project_root / config.baselines_dir
    path.mkdir(parents=True)
    return path


@pytest.fixture
def current_dir(project_root: Path, config: VisregConfig) -> Path:
    path = project_root / config.current_dir
    path.mkdir(parents=True)
    return path
