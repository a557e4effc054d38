"""
S3 Prefix Purge - Utilities Module

Shared logging setup used by every module.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import LOGGING


def setup_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Set up a logger with consistent format across modules.

    Console output goes to stderr so stdout stays reserved for progress
    and the final total.

    Args:
        name: Logger name (typically module name)
        log_dir: Directory for log files. If None, uses LOGGING["DIR"];
            no file handler is attached when neither is set.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt=LOGGING["FORMAT"],
        datefmt=LOGGING["DATE_FORMAT"]
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOGGING["LEVEL"])
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler
    log_dir = log_dir or LOGGING["DIR"]
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f"{name}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
