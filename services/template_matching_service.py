from __future__ import annotations

import logging
import os
from typing import List, Tuple

import cv2
import numpy as np
from dotenv import load_dotenv

from models.match_result import MatchResult
from services.image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

BOX_COLOR = (255, 0, 0)     # red, RGB order
BOX_THICKNESS = 2


class TemplateMatchingService:
    """
    Builds a test canvas out of rotated template copies and finds the
    template in it at each discrete rotation angle.
    *   No I/O here—works only with numpy arrays.
    *   Uses environment variables for configuration.
    """

    def __init__(self,
                 steps: int = None,
                 columns: int = None,
                 canvas_size: Tuple[int, int] = None):
        """
        Args:
            steps: Number of evenly spaced angles over 360 degrees (defaults to env var)
            columns: Tiles per row in the synthesized image (defaults to env var)
            canvas_size: (width, height) of the padded test image (defaults to env vars)
        """
        self.steps = steps or int(os.getenv("ROTATION_STEPS", "15"))
        self.columns = columns or int(os.getenv("TILE_COLUMNS", "5"))
        self.canvas_size = canvas_size or (
            int(os.getenv("CANVAS_WIDTH", "800")),
            int(os.getenv("CANVAS_HEIGHT", "450")),
        )
        if self.steps % self.columns != 0:
            raise ValueError(f"{self.steps} rotations do not fill rows of {self.columns} tiles")
        self.rows = self.steps // self.columns
        self.image_service = ImageService()

    @property
    def angles(self) -> List[float]:
        step = 360.0 / self.steps
        return [step * i for i in range(self.steps)]

    def row_order(self) -> List[int]:
        """
        Top-to-bottom order of tile rows: first row, then the remaining rows
        from last to second (0, 2, 1 for three rows).
        """
        return [0] + list(range(self.rows - 1, 0, -1))

    # ─── Public API ────────────────────────────────────────────────
    @staticmethod
    def rotate(pixels: np.ndarray, angle: float) -> np.ndarray:
        """
        Rotate counter-clockwise about the image centre, keeping the size.
        Corners that leave the frame are lost; uncovered areas become black.
        """
        height, width = pixels.shape[:2]
        center = (width / 2.0, height / 2.0)
        matrix = cv2.getRotationMatrix2D(center, angle, 1.0)
        return cv2.warpAffine(pixels, matrix, (width, height))

    def synthesize_test_image(self, template: np.ndarray) -> np.ndarray:
        """
        Args:
            template: (H, W) uint8 template

        Returns:
            (canvas_h, canvas_w) uint8 image of rotated tiles centred on black.
        """
        template_f = template.astype(np.float32)
        rotated = [self.rotate(template_f, angle) for angle in self.angles]

        strips = [
            np.hstack(rotated[r * self.columns:(r + 1) * self.columns])
            for r in range(self.rows)
        ]
        tiled = np.vstack([strips[r] for r in self.row_order()])
        tiled = self.image_service.to_uint8(tiled)

        canvas_w, canvas_h = self.canvas_size
        tiled_h, tiled_w = tiled.shape[:2]
        if tiled_w > canvas_w or tiled_h > canvas_h:
            raise ValueError(
                f"Tiled image {tiled_w}x{tiled_h} does not fit the {canvas_w}x{canvas_h} canvas"
            )
        pad_width = (canvas_w - tiled_w) // 2
        pad_height = (canvas_h - tiled_h) // 2
        logger.debug(f"Tiled {self.columns}x{self.rows} → {tiled_w}x{tiled_h}, padding ({pad_width}, {pad_height})")
        return self.image_service.pad_constant(tiled, pad_height, pad_height, pad_width, pad_width, value=0)

    def match_rotations(self, target: np.ndarray, template: np.ndarray) -> Tuple[np.ndarray, List[MatchResult]]:
        """
        Run TM_CCOEFF_NORMED once per angle and box the best location.
        Every angle draws a box; nothing is thresholded or merged.

        Returns:
            (annotated RGB copy of *target*, one MatchResult per angle)
        """
        t_h, t_w = template.shape[:2]
        img_h, img_w = target.shape[:2]
        if t_h > img_h or t_w > img_w:
            raise ValueError(f"Template {t_w}x{t_h} is larger than target {img_w}x{img_h}")

        out = self.image_service.to_rgb(target)
        results: List[MatchResult] = []
        for angle in self.angles:
            rotated = self.rotate(template, angle)
            scores = cv2.matchTemplate(target, rotated, cv2.TM_CCOEFF_NORMED)
            _, max_val, _, max_loc = cv2.minMaxLoc(scores)

            result = MatchResult(angle=angle, location=(int(max_loc[0]), int(max_loc[1])),
                                 score=float(max_val), size=(t_w, t_h))
            x2, y2 = result.bottom_right
            cv2.rectangle(out, result.location, (x2 - 1, y2 - 1), BOX_COLOR, BOX_THICKNESS)
            results.append(result)

        return out, results
