"""
Median Comparison Pipeline
Runs OpenCV's median blur at several kernel sizes next to the hand-rolled
median filter on the same reflect-padded image.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Sequence
from dotenv import load_dotenv

from models.image import Image
from services.image_service import ImageService
from services.env import env_flag
from services.median_filter_service import MedianFilterService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

INPUT_PATH = os.getenv("MEDIAN_INPUT_PATH", "./img/in.jpg")
OUTPUT_DIR = os.getenv("MEDIAN_OUTPUT_DIR") or None
RESIZE_WIDTH = int(os.getenv("MEDIAN_RESIZE_WIDTH", "800"))
BORDER = int(os.getenv("MEDIAN_BORDER", "1"))
LIBRARY_SIZES = tuple(int(k) for k in os.getenv("MEDIAN_LIBRARY_SIZES", "5,11,21").split(",") if k.strip())
CUSTOM_SIZE = int(os.getenv("MEDIAN_CUSTOM_SIZE", "3"))
SHOW_WINDOWS = env_flag("SHOW_WINDOWS", "true")
SHOW_ALL = env_flag("MEDIAN_SHOW_ALL")


def run_median_comparison(
    input_path: str | Path = INPUT_PATH,
    *,
    image_service: ImageService = None,
    median_service: MedianFilterService = None,
    width: int = RESIZE_WIDTH,
    border: int = BORDER,
    library_sizes: Sequence[int] = LIBRARY_SIZES,
    custom_size: int = CUSTOM_SIZE,
    output_dir: str | Path | None = OUTPUT_DIR,
    show: bool = SHOW_WINDOWS,
    show_all: bool = SHOW_ALL,
) -> Dict[str, Image]:
    """
    Compare the hand-rolled median filter with cv2.medianBlur.

    Steps:
    1. Load *input_path* as grayscale and resize to *width* (aspect kept)
    2. Reflect-pad *border* pixels on every side
    3. Library median at each of *library_sizes* on the padded image, cropped back
    4. Library median at *custom_size* on the unpadded image (reference)
    5. Custom median at *custom_size* on the padded image, cropped back
    6. Log how far the custom result is from the reference

    Args:
        input_path: Image to filter
        image_service: Service for image operations
        median_service: Service holding both median filters
        width: Target width after resizing
        border: Reflect padding in pixels
        library_sizes: Kernel sizes for the library-only outputs
        custom_size: Kernel size of the hand-rolled filter
        output_dir: Where to write out<k>.png, ref<k>.png and myout<k>.png; nothing is written when None
        show: Open the reference and custom windows and wait for a key press
        show_all: Also show the library-only outputs

    Returns:
        Dict[str, Image]: outputs keyed by window name (out05, out11, out21, ref03, myout03)
    """
    image_service = image_service or ImageService()
    median_service = median_service or MedianFilterService()

    src_img = image_service.load(input_path, grayscale=True)
    resized = image_service.resize_to_width(src_img, width)
    height = resized.shape[0]
    logger.info(f"Loaded {input_path}, resized to {width}x{height}")

    extended = image_service.pad_reflect(resized, border)

    outputs: Dict[str, Image] = {}
    file_stems: Dict[str, str] = {}
    for ksize in library_sizes:
        blurred = median_service.library_median_blur(extended, ksize)
        name = f"out{ksize:02d}"
        file_stems[name] = f"out{ksize}"
        outputs[name] = image_service.create_image(
            image_service.unpad(blurred, border, width, height), name=name
        )
        logger.info(f"Library median k={ksize} done")

    reference = median_service.library_median_blur(resized, custom_size)
    reference_name = f"ref{custom_size:02d}"
    file_stems[reference_name] = f"ref{custom_size}"
    outputs[reference_name] = image_service.create_image(reference, name=reference_name)

    if custom_size // 2 > border:
        logger.warning(f"Border {border} is narrower than k={custom_size} needs; edge pixels stay 0")
    custom = median_service.custom_median_blur(extended, custom_size)
    custom_name = f"myout{custom_size:02d}"
    file_stems[custom_name] = f"myout{custom_size}"
    outputs[custom_name] = image_service.create_image(
        image_service.unpad(custom, border, width, height), name=custom_name
    )

    comparison = median_service.compare(outputs[custom_name].pixels, reference)
    if comparison.identical:
        logger.info(f"Custom k={custom_size} is identical to the library median")
    else:
        logger.info(
            f"Custom k={custom_size} vs library k={custom_size}: {comparison.differing_pixels} differing pixels, "
            f"max |diff| {comparison.max_abs_diff}, mean |diff| {comparison.mean_abs_diff:.3f}"
        )

    if output_dir is not None:
        output_dir = Path(output_dir)
        for name, img in outputs.items():
            img.path = output_dir / f"{file_stems[name]}.png"
        image_service.save_gallery(outputs.values())

    if show:
        names = list(outputs) if show_all else [reference_name, custom_name]
        image_service.show_gallery([outputs[n] for n in names])

    return outputs
