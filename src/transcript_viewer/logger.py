"""
Logging setup for the transcript viewer.

Diagnostics go to a log file under the data directory so they never
interleave with transcript output on the terminal.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .runtime_config import LOG_LEVEL_ENV, get_data_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "transcript_viewer.log"


def setup_logging(level: Optional[str] = None, log_dir: Optional[Path] = None) -> Path:
    """
    Attach a file handler to the package logger and return the log file path.

    A handler already writing to the same file is reused.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    log_dir = log_dir or get_data_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    package_logger = logging.getLogger("transcript_viewer")
    package_logger.setLevel(level_name)

    for handler in package_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == (
            os.path.abspath(log_path)
        ):
            return log_path

    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(file_handler)
    return log_path
