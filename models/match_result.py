from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass
class MatchResult:
    """
    Data object holding the best template location for one rotation angle.
    """
    angle: float                # Template rotation in degrees (counter-clockwise)
    location: Tuple[int, int]   # (x, y) of the top-left corner of the best match
    score: float                # Peak normalized correlation coefficient [-1, 1]
    size: Tuple[int, int]       # (width, height) of the rotated template

    @property
    def bottom_right(self) -> Tuple[int, int]:
        x, y = self.location
        w, h = self.size
        return x + w, y + h
