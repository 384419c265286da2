"""
Logging configuration

Console output goes to stderr so the CLI keeps stdout for its own output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from todo_manager.config.settings import settings
from todo_manager.config.constants import LOG_FORMAT, LOG_DATE_FORMAT, LOG_FILE_NAME


def setup_logger(name: str = "todo_manager", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Setup and configure logger

    Args:
        name: Logger name
        log_dir: Directory for the rotating log file (LOG_DIR setting by default;
            an empty value disables the file)

    Returns:
        Configured logger instance
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    log_dir = settings.LOG_DIR if log_dir is None else log_dir

    logger = logging.getLogger(name)
    logger.setLevel(min(level, logging.DEBUG) if log_dir else level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # The file keeps debug detail for every request and store call
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / LOG_FILE_NAME,
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Global logger instance
logger = setup_logger()
