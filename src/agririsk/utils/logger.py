"""
Loguru setup for the engine and the batch CLI
"""

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    log_file: str = "agririsk.log",
    rotation: str = "10 MB",
    retention: str = "30 days",
    serialize: bool = False
):
    """
    Replace loguru's default sink

    Always logs to stderr. A rotating, zip-compressed file sink is added
    only when `log_dir` (or the LOG_DIR env var) is set. LOG_LEVEL in the
    environment wins over `log_level`.

    Returns:
        The configured loguru logger
    """
    logger.remove()
    level = os.getenv("LOG_LEVEL", log_level).upper()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    log_dir = log_dir or os.getenv("LOG_DIR")
    if not log_dir:
        logger.debug(f"Logging to stderr at {level}")
        return logger

    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_path),
        format=FILE_FORMAT,
        level=level,
        rotation=rotation,
        retention=retention,
        compression="zip",
        serialize=serialize
    )
    logger.info(f"Logging to stderr and {log_path} at {level}")
    return logger


def get_logger(name: Optional[str] = None):
    """Loguru logger, bound to `name` when given"""
    return logger.bind(name=name) if name else logger
