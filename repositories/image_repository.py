from pathlib import Path
from typing import Union
import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv
import logging
import os
import signal
from models.image import Image

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O and pixel updates for Image entities.
    """
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg,.bmp").split(",")
        }
        self.read_timeout = int(os.getenv("IMAGE_READ_TIMEOUT", "5"))

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None, name: str = None) -> Image:
        if path is None:
            return Image(pixels, name=name)
        return Image(pixels=pixels, path=Path(path), name=name)

    def retrieve_image_dimensions(self, img: Image):
        return img.pixels.shape[:2]

    def load(self, path: Union[str, Path], grayscale: bool = True, timeout: int = None) -> Image:
        path = Path(path)
        timeout = self.read_timeout if timeout is None else timeout

        # ─── timeout wrapper (5 s default) ────────────────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        flags = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
        previous = signal.signal(signal.SIGALRM, _handler)
        signal.alarm(timeout)
        try:
            arr = cv2.imread(str(path), flags)
        finally:
            signal.alarm(0)  # always disarm
            signal.signal(signal.SIGALRM, previous)
        # ──────────────────────────────────────────────────────────────────

        if arr is None or arr.size == 0:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        if not grayscale:
            arr = cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)
        logger.debug(f"Loaded {path} with shape {arr.shape}")
        return Image(pixels=arr, path=path, name=path.stem)

    def save(self, image: Image) -> None:
        if image.path is None:
            raise ValueError("Cannot save an image without a path")
        path = Path(image.path)
        if path.suffix.lower() not in self.VALID_EXTS:
            raise ValueError(f"Unsupported image extension '{path.suffix}': {path}")
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(image.pixels).save(path)
        logger.info(f"Saved: {path}")

