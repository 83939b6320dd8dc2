# tickerlens/utils/logger.py

import logging
import os
import sys
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
UI_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
UI_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Optional[str]) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    numeric_level = getattr(logging, str(level or "").upper(), None)
    return numeric_level if isinstance(numeric_level, int) else logging.INFO


def _file_handler(log_file: str, formatter: logging.Formatter) -> logging.FileHandler:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(formatter)
    return handler


def get_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[str] = None,
    fmt: str = CONSOLE_FORMAT,
    datefmt: Optional[str] = None,
    propagate: bool = True,
) -> logging.Logger:
    """
    Create or retrieve a logger writing to stdout and optionally to a file.

    Handlers are attached on the first call for a name only; later calls
    return the same logger unchanged.

    Args:
        name (str): Name of the logger.
        level (str, optional): Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        log_file (str, optional): Path to log file. If None, logs only to console.
        fmt (str, optional): Record format.
        datefmt (str, optional): Timestamp format.
        propagate (bool, optional): Whether records also reach ancestor loggers.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(resolve_level(level))
    logger.propagate = propagate
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        logger.addHandler(_file_handler(log_file, formatter))

    return logger
