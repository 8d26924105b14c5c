"""Tests for image geometry helpers and file I/O"""

import numpy as np
import pytest
from PIL import Image as PILImage

from models.image import Image
from repositories.image_repository import ImageRepository
from services.image_service import ImageService


class TestImageGeometry:
    """Test resizing, padding and cropping"""

    def setup_method(self):
        self.service = ImageService()

    def test_resize_keeps_aspect_ratio(self):
        img = Image(np.zeros((50, 100), dtype=np.uint8))
        out = self.service.resize_to_width(img, 800)
        assert out.shape == (400, 800)

    def test_resize_rounds_height(self):
        img = Image(np.zeros((7, 30), dtype=np.uint8))
        out = self.service.resize_to_width(img, 800)
        assert out.shape == (187, 800)

    @pytest.mark.parametrize("width, expected_height", [(5, 3), (9, 5), (7, 4)])
    def test_resize_rounds_halves_up(self, width, expected_height):
        # 2:1 aspect ratio, so the exact height is width / 2
        img = Image(np.zeros((6, 12), dtype=np.uint8))
        out = self.service.resize_to_width(img, width)
        assert out.shape == (expected_height, width)

    def test_resize_rejects_non_positive_width(self):
        with pytest.raises(ValueError):
            self.service.resize_to_width(Image(np.zeros((4, 4), dtype=np.uint8)), 0)

    def test_pad_reflect_101_skips_edge_pixel(self):
        row = np.array([[1, 2, 3]], dtype=np.uint8)
        padded = self.service.pad_reflect(np.vstack([row, row + 10]), 1)
        np.testing.assert_array_equal(padded[1], [2, 1, 2, 3, 2])
        # Top row mirrors the second image row
        np.testing.assert_array_equal(padded[0], [12, 11, 12, 13, 12])

    def test_unpad_inverts_pad(self, rng):
        img = rng.integers(0, 256, size=(20, 30), dtype=np.uint8)
        padded = self.service.pad_reflect(img, 3)
        assert padded.shape == (26, 36)
        np.testing.assert_array_equal(self.service.unpad(padded, 3, 30, 20), img)

    def test_pad_constant_is_black(self):
        out = self.service.pad_constant(np.full((2, 2), 200, dtype=np.uint8), 1, 1, 2, 2)
        assert out.shape == (4, 6)
        assert out[0].sum() == 0 and out[:, :2].sum() == 0
        assert (out[1:3, 2:4] == 200).all()

    def test_pad_constant_rejects_negative(self):
        with pytest.raises(ValueError):
            self.service.pad_constant(np.zeros((2, 2), dtype=np.uint8), -1, 0, 0, 0)

    @pytest.mark.parametrize("bounds", [
        dict(bound_r=2, bound_l=2, bound_t=0, bound_b=3),
        dict(bound_r=3, bound_l=0, bound_t=3, bound_b=1),
        dict(bound_r=9, bound_l=0, bound_t=0, bound_b=3),
    ])
    def test_crop_rejects_invalid_bounds(self, bounds):
        with pytest.raises(ValueError):
            self.service.crop_pixels(np.zeros((5, 5), dtype=np.uint8), **bounds)

    def test_crop_returns_copy(self):
        pixels = np.arange(25, dtype=np.uint8).reshape(5, 5)
        crop = self.service.crop_pixels(pixels, bound_r=4, bound_l=1, bound_t=2, bound_b=5)
        np.testing.assert_array_equal(crop, pixels[2:5, 1:4])
        crop[0, 0] = 255
        assert pixels[2, 1] == 11

    def test_to_rgb(self):
        out = self.service.to_rgb(np.full((3, 4), 77, dtype=np.uint8))
        assert out.shape == (3, 4, 3)
        assert (out == 77).all()

    def test_to_uint8_rounds_and_saturates(self):
        out = self.service.to_uint8(np.array([-5.0, 1.6, 254.4, 300.0], dtype=np.float32))
        np.testing.assert_array_equal(out, [0, 2, 254, 255])
        assert out.dtype == np.uint8


class TestImageRepository:
    """Test loading and saving through the repository"""

    def setup_method(self):
        self.repo = ImageRepository()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            self.repo.load(tmp_path / "missing.png")

    def test_grayscale_round_trip(self, tmp_path, rng):
        pixels = rng.integers(0, 256, size=(12, 16), dtype=np.uint8)
        self.repo.save(Image(pixels, path=tmp_path / "nested" / "gray.png"))
        loaded = self.repo.load(tmp_path / "nested" / "gray.png")
        np.testing.assert_array_equal(loaded.pixels, pixels)
        assert loaded.name == "gray"

    def test_color_load_is_rgb(self, tmp_path):
        rgb = np.zeros((4, 4, 3), dtype=np.uint8)
        rgb[..., 0] = 255
        PILImage.fromarray(rgb).save(tmp_path / "red.png")
        loaded = self.repo.load(tmp_path / "red.png", grayscale=False)
        np.testing.assert_array_equal(loaded.pixels[0, 0], [255, 0, 0])

    def test_save_without_path_raises(self):
        with pytest.raises(ValueError):
            self.repo.save(Image(np.zeros((2, 2), dtype=np.uint8)))

    def test_save_rejects_unknown_extension(self, tmp_path):
        with pytest.raises(ValueError):
            self.repo.save(Image(np.zeros((2, 2), dtype=np.uint8), path=tmp_path / "x.txt"))
