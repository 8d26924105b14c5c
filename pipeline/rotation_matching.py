"""
Rotation Matching Pipeline
Synthesizes a test image from rotated template copies, then locates the
template at every rotation angle with normalized cross-correlation.
"""

import logging
import os
from pathlib import Path
from typing import List, Tuple
from dotenv import load_dotenv

from models.image import Image
from models.match_result import MatchResult
from services.image_service import ImageService
from services.env import env_flag
from services.template_matching_service import TemplateMatchingService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

TEMPLATE_PATH = os.getenv("ROTATION_TEMPLATE_PATH", "../img/kadai8/template.png")
OUTPUT_DIR = os.getenv("ROTATION_OUTPUT_DIR", "../img/kadai8") or None
SHOW_WINDOWS = env_flag("SHOW_WINDOWS", "true")


def run_rotation_matching(
    template_path: str | Path = TEMPLATE_PATH,
    *,
    image_service: ImageService = None,
    matching_service: TemplateMatchingService = None,
    output_dir: str | Path | None = OUTPUT_DIR,
    show: bool = SHOW_WINDOWS,
) -> Tuple[Image, Image, List[MatchResult]]:
    """
    Load the template, build the rotated-tile test image and box the best
    match for each rotation angle.

    Args:
        template_path: Grayscale template to rotate and search for
        image_service: Service for image operations
        matching_service: Service for synthesis and matching
        output_dir: Where in.png and out.png are written; nothing is written when None
        show: Open src_img / input_img / out_img windows and wait for a key press

    Returns:
        (input image, annotated output image, one MatchResult per angle)
    """
    image_service = image_service or ImageService()
    matching_service = matching_service or TemplateMatchingService()

    src_img = image_service.load(template_path, grayscale=True)
    src_img.name = "src_img"
    logger.info(f"Loaded template {template_path} with shape {src_img.pixels.shape}")

    input_pixels = matching_service.synthesize_test_image(src_img.pixels)
    input_img = image_service.create_image(input_pixels, name="input_img")
    logger.info(f"Synthesized {matching_service.steps} rotated tiles into {input_pixels.shape[1]}x{input_pixels.shape[0]}")

    out_pixels, matches = matching_service.match_rotations(input_pixels, src_img.pixels)
    out_img = image_service.create_image(out_pixels, name="out_img")
    for match in matches:
        logger.info(f"angle {match.angle:6.1f}° → {match.location} (score {match.score:.3f})")

    if output_dir is not None:
        output_dir = Path(output_dir)
        input_img.path = output_dir / "in.png"
        out_img.path = output_dir / "out.png"
        image_service.save_gallery([input_img, out_img])

    if show:
        image_service.show_gallery([src_img, input_img, out_img])

    return input_img, out_img, matches
