import sys
import logging

from .config import Config
from .pipeline import run_pipeline

# === Setup Logging ===
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


def main() -> int:
    try:
        run_pipeline(Config)
    except Exception:
        logging.exception("Pipeline failed")
        return 1
    return 0


# === Run the pipeline ===
if __name__ == '__main__':
    sys.exit(main())
