from __future__ import annotations

import logging

import cv2
import numpy as np
from dotenv import load_dotenv
from numpy.lib.stride_tricks import sliding_window_view

from models.median_comparison import MedianComparison
from services.env import env_flag

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class MedianFilterService:
    """
    Hand-rolled median filter next to the OpenCV one.
    *   Works on single-channel uint8 numpy arrays only.
    *   Border pixels are left at 0; callers pad first and crop afterwards.
    """

    def __init__(self, legacy_rank: bool | None = None):
        """
        Args:
            legacy_rank: Pick the element one above the median after sorting
                (``k*k // 2 + 1``) instead of the median itself. Defaults to
                the ``MEDIAN_LEGACY_RANK`` env var.
        """
        self.legacy_rank = env_flag("MEDIAN_LEGACY_RANK") if legacy_rank is None else legacy_rank

    # ─── Public API ────────────────────────────────────────────────
    def rank_index(self, filter_size: int) -> int:
        """Index into the sorted k*k neighbourhood that becomes the output value."""
        count = filter_size * filter_size
        return count // 2 + 1 if self.legacy_rank else count // 2

    def custom_median_blur(self, pixels: np.ndarray, filter_size: int) -> np.ndarray:
        """
        Replace every interior pixel with the ranked value of its
        filter_size x filter_size neighbourhood.

        Args:
            pixels: (H, W) uint8 array
            filter_size: odd kernel size; <= 1 returns a copy

        Returns:
            (H, W) uint8 array; the outer filter_size // 2 pixels are 0.
        """
        if pixels.ndim != 2:
            raise ValueError(f"Expected a single-channel (H, W) array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")

        if filter_size <= 1:
            return pixels.copy()
        if filter_size % 2 != 1:
            raise ValueError(f"Filter size must be odd, got {filter_size}")

        height, width = pixels.shape
        affect_area = filter_size // 2
        out = np.zeros((height, width), dtype=np.uint8)
        if height < filter_size or width < filter_size:
            logger.warning(f"{width}x{height} image has no interior for filter size {filter_size}")
            return out

        # (H-k+1, W-k+1, k, k) view, one window per interior pixel
        windows = sliding_window_view(pixels, (filter_size, filter_size))
        flat = windows.reshape(windows.shape[0], windows.shape[1], -1)
        ranked = np.sort(flat, axis=-1)[..., self.rank_index(filter_size)]

        out[affect_area:height - affect_area, affect_area:width - affect_area] = ranked
        logger.debug(f"Custom median k={filter_size} on {width}x{height} (legacy_rank={self.legacy_rank})")
        return out

    @staticmethod
    def library_median_blur(pixels: np.ndarray, ksize: int) -> np.ndarray:
        """cv2.medianBlur with the kernel size checked up front."""
        if ksize < 1 or ksize % 2 != 1:
            raise ValueError(f"Kernel size must be a positive odd number, got {ksize}")
        return cv2.medianBlur(pixels, ksize)

    @staticmethod
    def compare(custom: np.ndarray, reference: np.ndarray) -> MedianComparison:
        if custom.shape != reference.shape:
            raise ValueError(f"Shape mismatch: {custom.shape} vs {reference.shape}")
        diff = np.abs(custom.astype(np.int16) - reference.astype(np.int16))
        return MedianComparison(
            differing_pixels=int(np.count_nonzero(diff)),
            max_abs_diff=int(diff.max()) if diff.size else 0,
            mean_abs_diff=float(diff.mean()) if diff.size else 0.0,
        )
