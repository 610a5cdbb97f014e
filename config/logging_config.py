import logging
import sys
from typing import Optional

from config.settings import settings


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger once for the API process and return the
    application logger.
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper())

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # outbound HTTP clients are chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger("cleansweep")
    logger.setLevel(log_level)
    return logger
