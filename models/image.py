from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class Image:
    """
    Simple data object: grayscale or RGB pixels (+ optional path and window name).
    No OpenCV logic outside the repositories and services.
    """
    pixels: np.ndarray # Shape (H, W) or (H, W, 3), dtype uint8, RGB order.
    path: Path | None = None # Source or destination of the image.
    name: str | None = None # Window title / output label.
