"""Logging setup shared by the rate table, sampling and simulator modules."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = 'mc_photodisintegration'

Level = Union[int, str]


def _to_level(level: Level) -> int:
    """Accept logging levels as ints or names such as 'debug'."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level}")
    return value


def setup_logger(
    name: str = LOGGER_NAME,
    level: Level = logging.INFO,
    log_file: Optional[str] = None,
    file_level: Level = logging.DEBUG
) -> logging.Logger:
    """Set up the package logger with console and optional file output.

    The console shows records at ``level`` and above; the log file, if
    any, receives everything down to ``file_level``.

    Args:
        name: Logger name
        level: Console logging level (int or name)
        log_file: Optional path to log file
        file_level: Logging level for file output

    Returns:
        Configured logger instance
    """
    console_level = _to_level(level)
    logger = logging.getLogger(name)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    logger.addHandler(console_handler)
    logger.setLevel(console_level)

    if log_file:
        file_level = _to_level(file_level)
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)
        logger.setLevel(min(console_level, file_level))

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get existing logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
