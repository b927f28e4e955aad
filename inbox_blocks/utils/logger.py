# File: inbox_blocks/utils/logger.py
"""
Centralized logging configuration for Inbox Blocks.
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))


def _resolve_level(level) -> int:
    """Accept either a logging constant or a level name such as 'DEBUG'."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(name: str = "inbox_blocks", level=None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: LOG_LEVEL env var, else INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    level = _resolve_level(level if level is not None else os.getenv("LOG_LEVEL", "INFO"))
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_format = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler for persistent logs; hourly runs append to one file per day
    try:
        LOG_DIR.mkdir(exist_ok=True)
        log_file = LOG_DIR / f"inbox_blocks_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
    except OSError as e:
        logger.warning(f"File logging disabled, could not open log directory {LOG_DIR}: {e}")
    else:
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger

