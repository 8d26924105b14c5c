# repositories/window_repository.py
import cv2
import numpy as np


class WindowRepository:
    """
    Thin access layer over OpenCV HighGUI windows.

    • Accepts grayscale or RGB pixels; converts RGB → BGR for display.
    • Blocking: wait_key(0) returns only after a key press.
    """

    @staticmethod
    def show(name: str, pixels: np.ndarray) -> None:
        if pixels.ndim == 3:
            pixels = cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)
        cv2.imshow(name, pixels)

    @staticmethod
    def wait_key(delay: int = 0) -> int:
        return cv2.waitKey(delay)

    @staticmethod
    def close_all() -> None:
        cv2.destroyAllWindows()
