"""Logging setup for apbuild.

Progress for humans is printed by the components themselves; the logging
module carries the diagnostic trail. Records go to stderr (so they never mix
with cargo directives on stdout) and to a rotating log file in the output
directory.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "apbuild.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(out_dir: Optional[Path] = None, verbose: bool = False) -> None:
    """Configure the apbuild logger.

    Args:
        out_dir: Output directory for the log file (no file logging if None)
        verbose: Log DEBUG records to the console instead of WARNING and above
    """
    logger = logging.getLogger("apbuild")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if out_dir is not None:
        Path(out_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(Path(out_dir) / LOG_FILE_NAME),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
