"""Logging setup for the command-line and web entry points.

Library modules only create module loggers; handlers are installed here.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "rps_regret"


def setup_logging(
    log_level: Union[int, str] = logging.WARNING,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the package logger for console and optional file output.

    Args:
        log_level: Level name ("DEBUG", "INFO", ...) or logging constant.
        log_file: Optional path; gets the detailed format.

    Returns:
        logging.Logger: The configured package logger.
    """
    if isinstance(log_level, str):
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: '{log_level}'")
        log_level = level

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode='w', encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)
        logger.info("Logging to %s", path)

    return logger
