# =============================================================================
# tests/test_imaging.py - Crop Geometry & Rasterization Tests
# =============================================================================
# This module contains tests for:
# - compute_crop_rect: zoom/pan/aspect -> pixel rectangle
# - clamp_crop_rect: bounds handling
# - resolve_crop: exact output size, JPEG encoding, error cases
# =============================================================================

import io
from unittest.mock import patch

import pytest
from PIL import Image

from lib.imaging import (
    CLIENT_ASPECT,
    PROJECT_ASPECT,
    CropRect,
    CropSelection,
    DecodeError,
    EncodeError,
    InvalidCropError,
    clamp_crop_rect,
    compute_crop_rect,
    decode_image,
    resolve_crop,
)
from tests.conftest import make_image_bytes


# =============================================================================
# compute_crop_rect Tests
# =============================================================================

class TestComputeCropRect:
    """Test converting cropper state to source pixels."""

    def test_project_aspect_on_wide_image_uses_full_height(self):
        rect = compute_crop_rect((1600, 900), CropSelection(aspect=PROJECT_ASPECT))

        assert rect.height == 900
        assert rect.width == 1200
        assert rect.x == 200  # centred
        assert rect.y == 0

    def test_square_aspect_on_tall_image_uses_full_width(self):
        rect = compute_crop_rect((600, 1000), CropSelection(aspect=CLIENT_ASPECT))

        assert (rect.width, rect.height) == (600, 600)
        assert rect.x == 0
        assert rect.y == 200

    def test_zoom_shrinks_window(self):
        rect = compute_crop_rect((1000, 1000), CropSelection(aspect=1.0, zoom=2.0))

        assert (rect.width, rect.height) == (500, 500)
        assert (rect.x, rect.y) == (250, 250)

    def test_pan_moves_window_to_edges(self):
        left_top = compute_crop_rect((1000, 1000), CropSelection(aspect=1.0, zoom=2.0, pan_x=-1, pan_y=-1))
        right_bottom = compute_crop_rect((1000, 1000), CropSelection(aspect=1.0, zoom=2.0, pan_x=1, pan_y=1))

        assert (left_top.x, left_top.y) == (0, 0)
        assert (right_bottom.x, right_bottom.y) == (500, 500)

    def test_out_of_range_zoom_and_pan_are_clamped(self):
        rect = compute_crop_rect((900, 900), CropSelection(aspect=1.0, zoom=10, pan_x=5))

        assert rect.width == 300  # max zoom is 3
        assert rect.x + rect.width == 900

    def test_rect_always_inside_image(self):
        for zoom in (1.0, 1.3, 2.7, 3.0):
            for pan in (-1.0, -0.4, 0.0, 0.6, 1.0):
                rect = compute_crop_rect((1234, 567), CropSelection(PROJECT_ASPECT, zoom, pan, -pan))
                assert rect.x >= 0 and rect.y >= 0
                assert rect.x + rect.width <= 1234
                assert rect.y + rect.height <= 567

    def test_non_positive_aspect_rejected(self):
        with pytest.raises(ValueError):
            CropSelection(aspect=0)


# =============================================================================
# clamp_crop_rect Tests
# =============================================================================

class TestClampCropRect:

    def test_inside_rect_unchanged(self):
        rect = CropRect(10, 20, 100, 50)
        assert clamp_crop_rect(rect, (200, 200)) == rect

    def test_overhanging_rect_is_trimmed(self):
        rect = clamp_crop_rect(CropRect(-10, 150, 100, 100), (200, 200))
        assert rect == CropRect(0, 150, 90, 50)

    def test_rect_outside_image_raises(self):
        with pytest.raises(InvalidCropError) as exc_info:
            clamp_crop_rect(CropRect(300, 300, 10, 10), (200, 200))
        assert exc_info.value.code == "INVALID_CROP"


# =============================================================================
# resolve_crop Tests
# =============================================================================

class TestResolveCrop:

    @pytest.mark.parametrize(
        "rect",
        [CropRect(0, 0, 800, 600), CropRect(100, 50, 400, 300), CropRect(799, 599, 1, 1), CropRect(0, 0, 37, 512)],
    )
    def test_output_matches_rect_size(self, rect):
        blob = resolve_crop(make_image_bytes((800, 600)), rect)

        output = Image.open(io.BytesIO(blob))
        assert output.size == (rect.width, rect.height)

    def test_output_is_jpeg(self, png_bytes):
        blob = resolve_crop(png_bytes, CropRect(0, 0, 100, 100))

        assert blob[:3] == b"\xff\xd8\xff"
        assert Image.open(io.BytesIO(blob)).format == "JPEG"

    def test_copies_pixels_without_resampling(self):
        source = Image.new("RGB", (200, 100), (0, 0, 255))
        source.paste((255, 0, 0), (100, 0, 200, 100))  # right half red

        blob = resolve_crop(source, CropRect(120, 10, 60, 60))

        r, g, b = Image.open(io.BytesIO(blob)).convert("RGB").getpixel((30, 30))
        assert r > 200 and b < 60

    def test_transparent_png_is_flattened(self):
        blob = resolve_crop(make_image_bytes((50, 50), (0, 0, 0, 0), mode="RGBA"), CropRect(0, 0, 50, 50))

        output = Image.open(io.BytesIO(blob))
        assert output.mode == "RGB"
        assert min(output.getpixel((25, 25))) > 240

    def test_accepts_decoded_image(self, png_bytes):
        image = decode_image(png_bytes)
        assert resolve_crop(image, CropRect(0, 0, 10, 10)) == resolve_crop(image, CropRect(0, 0, 10, 10))

    def test_garbage_bytes_raise_decode_error(self):
        with pytest.raises(DecodeError):
            resolve_crop(b"definitely not an image", CropRect(0, 0, 10, 10))

    def test_empty_bytes_raise_decode_error(self):
        with pytest.raises(DecodeError):
            decode_image(b"")

    def test_empty_encoder_output_raises_encode_error(self, png_bytes):
        with patch("lib.imaging.Image.Image.save", return_value=None):
            with pytest.raises(EncodeError):
                resolve_crop(png_bytes, CropRect(0, 0, 10, 10))
