import logging
import sys

from cli import configure_logging
from pipeline.median_comparison import run_median_comparison

logger = logging.getLogger(__name__)


def main() -> int:
    configure_logging()

    print(f"\nStarting median filter comparison...")
    try:
        outputs = run_median_comparison()
    except FileNotFoundError as err:
        logger.error(f"Input image could not be loaded: {err}")
        return -1

    print(f"\nMedian comparison complete! {len(outputs)} filtered images produced.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
