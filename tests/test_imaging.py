"""Tests for image decoding, reconciliation and pixel diffing."""

from pathlib import Path

import pytest

from visreg.errors import ImageDecodeError
from visreg.imaging.codec import load_image, save_image
from visreg.imaging.differ import diff_images, mismatch_percent
from visreg.imaging.reconciler import PAD_COLOR, pad_to, reconcile
from visreg.models.raster import RasterImage

from conftest import BLACK, BLUE, RED, WHITE, pixel, solid, write_png


# ============================================================================
# Codec
# ============================================================================


class TestCodec:
    """Tests for loading and saving rasters with Pillow."""

    def test_load_png(self, tmp_path: Path):
        path = write_png(tmp_path / "a.png", 4, 3, RED)
        img = load_image(path)
        assert img.size == (4, 3)
        assert pixel(img, 3, 2) == RED

    def test_load_rgb_png_gets_opaque_alpha(self, tmp_path: Path):
        from PIL import Image

        path = tmp_path / "rgb.png"
        Image.new("RGB", (2, 2), (10, 20, 30)).save(path)
        assert pixel(load_image(path), 0, 0) == (10, 20, 30, 255)

    def test_save_then_load(self, tmp_path: Path):
        img = RasterImage(2, 1, bytes([1, 2, 3, 255, 4, 5, 6, 128]))
        path = save_image(img, tmp_path / "sub" / "out.png")
        assert load_image(path) == img

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")

    def test_corrupt_file(self, tmp_path: Path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(ImageDecodeError) as exc_info:
            load_image(path)
        assert exc_info.value.path == path
        assert "broken.png" in str(exc_info.value)

    def test_truncated_png(self, tmp_path: Path):
        path = write_png(tmp_path / "full.png", 64, 64, BLUE)
        data = path.read_bytes()
        path.write_bytes(data[: len(data) // 2])
        with pytest.raises(ImageDecodeError):
            load_image(path)


# ============================================================================
# Reconciler
# ============================================================================


class TestReconcile:
    """Tests for padding images onto a common canvas."""

    def test_same_size_passes_through(self):
        a, b = solid(3, 3, RED), solid(3, 3, BLUE)
        ra, rb = reconcile(a, b)
        assert ra is a
        assert rb is b

    def test_both_padded_to_max_dimensions(self):
        a = solid(2, 5, RED)
        b = solid(4, 1, BLUE)
        ra, rb = reconcile(a, b)
        assert ra.size == (4, 5)
        assert rb.size == (4, 5)

    def test_original_pixels_kept_top_left(self):
        a = RasterImage(2, 2, bytes(range(16)))
        ra, _ = reconcile(a, solid(3, 4))
        for y in range(2):
            assert ra.row(y)[:8] == a.row(y)

    def test_padding_is_opaque_white(self):
        a = solid(2, 2, BLACK)
        ra, _ = reconcile(a, solid(3, 3))
        assert pixel(ra, 2, 0) == PAD_COLOR
        assert pixel(ra, 0, 2) == PAD_COLOR
        assert pixel(ra, 2, 2) == PAD_COLOR
        assert pixel(ra, 1, 1) == BLACK

    def test_pad_to_rejects_shrinking(self):
        with pytest.raises(ValueError):
            pad_to(solid(4, 4), 2, 4)

    def test_zero_sized_input(self):
        ra, rb = reconcile(solid(0, 0), solid(2, 1, RED))
        assert ra.size == (2, 1)
        assert pixel(ra, 0, 0) == WHITE
        assert rb.size == (2, 1)


# ============================================================================
# Differ
# ============================================================================


class TestDiffImages:
    """Tests for pixelmatch-based diffing."""

    def test_identical_images_have_no_mismatch(self):
        a = solid(10, 10, BLUE)
        outcome = diff_images(a, RasterImage(10, 10, bytes(a.data)))
        assert outcome.mismatch_pixels == 0
        assert outcome.mismatch_percent == 0
        assert outcome.diff_image.size == (10, 10)

    def test_counts_changed_block(self):
        base = solid(10, 10, WHITE)
        data = bytearray(base.data)
        for x, y in [(2, 2), (3, 2), (2, 3), (3, 3)]:
            i = (y * 10 + x) * 4
            data[i:i + 4] = bytes(BLACK)
        outcome = diff_images(base, RasterImage(10, 10, bytes(data)))
        assert outcome.mismatch_pixels == 4
        assert outcome.mismatch_percent == 4.0

    def test_mismatches_drawn_red(self):
        outcome = diff_images(solid(2, 2, WHITE), solid(2, 2, BLACK))
        assert outcome.mismatch_pixels == 4
        assert pixel(outcome.diff_image, 0, 0) == (255, 0, 0, 255)

    def test_matched_pixels_are_not_red(self):
        outcome = diff_images(solid(2, 2, BLUE), solid(2, 2, BLUE))
        r, g, b, a = pixel(outcome.diff_image, 1, 1)
        assert r == g == b
        assert a == 255

    def test_direction_independent_count(self):
        a = solid(6, 6, WHITE)
        data = bytearray(a.data)
        data[0:4] = bytes(RED)
        data[40:44] = bytes(BLUE)
        b = RasterImage(6, 6, bytes(data))
        assert diff_images(a, b).mismatch_pixels == diff_images(b, a).mismatch_pixels == 2

    def test_small_colour_change_below_threshold(self):
        a = solid(4, 4, (200, 200, 200, 255))
        b = solid(4, 4, (201, 201, 201, 255))
        assert diff_images(a, b, threshold=0.1).mismatch_pixels == 0

    def test_zero_threshold_catches_small_change(self):
        a = solid(4, 4, (200, 200, 200, 255))
        b = solid(4, 4, (180, 200, 200, 255))
        assert diff_images(a, b, threshold=0.0).mismatch_pixels == 16

    def test_alpha_only_difference_is_detected(self):
        a = solid(4, 4, (0, 0, 0, 255))
        b = solid(4, 4, (0, 0, 0, 128))
        assert diff_images(a, b).mismatch_pixels == 16

    def test_antialiased_pixels_counted_only_when_included(self):
        # Sharp black/white edge; the current image softens one edge pixel to grey.
        def edge(soft: bool) -> RasterImage:
            data = bytearray()
            for y in range(5):
                for x in range(5):
                    if soft and (x, y) == (2, 2):
                        data += bytes((128, 128, 128, 255))
                    else:
                        data += bytes(BLACK if x < 2 else WHITE)
            return RasterImage(5, 5, bytes(data))

        assert diff_images(edge(False), edge(True), include_aa=True).mismatch_pixels == 1
        assert diff_images(edge(False), edge(True), include_aa=False).mismatch_pixels == 0

    def test_alpha_fades_matched_pixels(self):
        black = solid(2, 2, BLACK)
        opaque = diff_images(black, solid(2, 2, BLACK), alpha=1.0)
        faded = diff_images(black, solid(2, 2, BLACK), alpha=0.5)
        hidden = diff_images(black, solid(2, 2, BLACK), alpha=0.0)
        assert pixel(opaque.diff_image, 0, 0) == (0, 0, 0, 255)
        assert pixel(hidden.diff_image, 0, 0) == (255, 255, 255, 255)
        assert 0 < pixel(faded.diff_image, 0, 0)[0] < 255

    def test_size_mismatch_raises(self):
        with pytest.raises(ValueError, match="sizes differ"):
            diff_images(solid(2, 2), solid(2, 3))


class TestMismatchPercent:
    """Tests for percentage normalization."""

    def test_rounds_to_three_places(self):
        assert mismatch_percent(1, 3, 3) == 11.111

    def test_full_mismatch(self):
        assert mismatch_percent(50, 5, 10) == 100.0

    def test_empty_canvas(self):
        assert mismatch_percent(0, 0, 0) == 0.0
