from __future__ import annotations
from dataclasses import dataclass


@dataclass
class MedianComparison:
    """
    Pixel-wise agreement between the hand-rolled median and the library one.
    """
    differing_pixels: int   # Number of pixels that are not identical
    max_abs_diff: int       # Largest absolute intensity difference
    mean_abs_diff: float    # Mean absolute intensity difference

    @property
    def identical(self) -> bool:
        return self.differing_pixels == 0
