from pathlib import Path
from typing import Iterable, Union
import logging
import math
import cv2
import numpy as np
from models.image import Image
from repositories.image_repository import ImageRepository
from repositories.window_repository import WindowRepository

logger = logging.getLogger(__name__)


class ImageService:
    """I/O and geometry helpers.  No filtering or matching logic."""
    def __init__(self):
        self.image_repository = ImageRepository()
        self.window_repository = WindowRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None, name: str = None) -> Image:
        return self.image_repository.create_image(pixels, path, name)

    def load(self, path: str | Path, grayscale: bool = True) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path, grayscale=grayscale)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path.
        """
        self.image_repository.save(image)

    def save_gallery(self, gallery: Iterable[Image]):
        for img in gallery:
            self.save(img)

    def show_gallery(self, gallery: Iterable[Image], wait: bool = True) -> None:
        """
        Open one window per image, then block until a key is pressed.
        """
        for img in gallery:
            self.window_repository.show(img.name or str(img.path), img.pixels)
        if wait:
            self.window_repository.wait_key(0)
            self.window_repository.close_all()

    def get_image_dimensions(self, img: Image):
        return self.image_repository.retrieve_image_dimensions(img)

    def resize_to_width(self, img: Image, width: int) -> np.ndarray:
        """
        Args:
            img (Image): The source image.
            width (int): Target width in pixels.

        Returns:
            (np.ndarray): Pixels resized to *width*, height chosen to keep the aspect ratio.
        """
        if width <= 0:
            raise ValueError(f"Target width must be positive, got {width}")
        height_img, width_img = self.get_image_dimensions(img)
        aspect_ratio = width_img / height_img
        # halves round up, like C round()
        height = int(math.floor(width / aspect_ratio + 0.5))
        logger.debug(f"Resizing {width_img}x{height_img} → {width}x{height}")
        return cv2.resize(img.pixels, (width, height))

    @staticmethod
    def pad_reflect(pixels: np.ndarray, border: int) -> np.ndarray:
        """Mirror *border* pixels on every side, excluding the edge pixel itself."""
        if border < 0:
            raise ValueError(f"Border must be non-negative, got {border}")
        return cv2.copyMakeBorder(pixels, border, border, border, border, cv2.BORDER_REFLECT_101)

    @staticmethod
    def pad_constant(pixels: np.ndarray, top: int, bottom: int, left: int, right: int, value: int = 0) -> np.ndarray:
        if min(top, bottom, left, right) < 0:
            raise ValueError(f"Padding must be non-negative, got {(top, bottom, left, right)}")
        return cv2.copyMakeBorder(pixels, top, bottom, left, right, cv2.BORDER_CONSTANT, value=value)

    @staticmethod
    def crop_pixels(pixels: np.ndarray, bound_r, bound_l, bound_t, bound_b) -> np.ndarray:
        width = bound_r - bound_l
        height = bound_b - bound_t
        if bound_l >= bound_r or bound_t >= bound_b:
            raise ValueError(f"Invalid crop bounds would create {width}x{height} image")

        img_h, img_w = pixels.shape[:2]
        if bound_l < 0 or bound_t < 0 or bound_r > img_w or bound_b > img_h:
            raise ValueError(
                f"Crop bounds ({bound_l},{bound_t},{bound_r},{bound_b}) exceed {img_w}x{img_h} image"
            )
        return pixels[bound_t:bound_b, bound_l:bound_r].copy()

    def unpad(self, pixels: np.ndarray, border: int, width: int, height: int) -> np.ndarray:
        """Crop the width x height region starting at (border, border)."""
        return self.crop_pixels(pixels, bound_r=border + width, bound_l=border,
                                bound_t=border, bound_b=border + height)

    @staticmethod
    def to_rgb(pixels: np.ndarray) -> np.ndarray:
        if pixels.ndim == 3:
            return pixels.copy()
        return cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)

    @staticmethod
    def to_uint8(pixels: np.ndarray) -> np.ndarray:
        """Round and saturate to 0..255, like cv::Mat::convertTo(CV_8U)."""
        return np.clip(np.rint(pixels), 0, 255).astype(np.uint8)

