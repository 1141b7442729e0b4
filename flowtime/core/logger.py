"""Logger configuration for Flowtime."""

import sys
from pathlib import Path

from loguru import logger

from flowtime.config.settings import settings

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str = "1 MB",
    retention: int = 3,
) -> None:
    """Route loguru output to stderr and, optionally, a rotating log file.

    Args:
        level: Logging level; falls back to ``settings.log_level``
        log_file: Optional log file path; falls back to ``settings.log_file``
        rotation: Size or interval at which the log file is rotated
        retention: Number of rotated files to keep
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    logger.debug(f"Logger initialized with level={level}")
