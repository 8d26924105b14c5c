import logging
import sys

from cli import configure_logging
from pipeline.rotation_matching import run_rotation_matching

logger = logging.getLogger(__name__)


def main() -> int:
    configure_logging()

    print(f"\nStarting rotation-invariant template matching...")
    try:
        _, out_img, matches = run_rotation_matching()
    except FileNotFoundError as err:
        logger.error(f"Template image could not be loaded: {err}")
        return -1

    print(f"\nMatching complete! {len(matches)} boxes drawn"
          + (f", result written to {out_img.path}" if out_img.path else ""))
    return 0


if __name__ == "__main__":
    sys.exit(main())
