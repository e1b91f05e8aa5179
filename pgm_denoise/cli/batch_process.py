import os
import sys
import logging
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    LOG_LEVEL = "INFO"  # unknown level name

# --- Centralized Logging Configuration ---
# This should be the first thing to run to ensure all modules use the same config.
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)
# ───────────────────────────────────────────

from ..models.errors import PgmError
from ..pipeline.median_denoiser import denoise_directory

logger = logging.getLogger(__name__)

INPUT_DIR = os.getenv("PGM_INPUT_DIR", "assets")
OUTPUT_DIR = os.getenv("PGM_OUTPUT_DIR", "./src/filtered_images")
STOP_ON_ERROR = os.getenv("PGM_STOP_ON_ERROR", "true").strip().lower() not in {"0", "false", "no", "off"}


def main() -> int:
    logger.info(f"Filtering {INPUT_DIR} -> {OUTPUT_DIR}")
    try:
        report = denoise_directory(INPUT_DIR, OUTPUT_DIR, stop_on_error=STOP_ON_ERROR)
    except PgmError as err:
        logger.error(f"Aborted: {err}")
        return 1

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
