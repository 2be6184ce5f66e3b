# src/btc_dca/utils/logger.py
import logging
import sys
import os
from typing import Optional, Set

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Names of loggers created through get_logger, so config can re-level them.
_managed_loggers: Set[str] = set()


def _file_handler(log_file: str, formatter: logging.Formatter) -> logging.FileHandler:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)  # Ensure directory exists
    handler = logging.FileHandler(log_file)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str, level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Create or retrieve a logger with optional file logging.

    Args:
        name (str): Name of the logger.
        level (str, optional): Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        log_file (str, optional): Path to log file. If None, logs only to console.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid adding duplicate handlers
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(numeric_level)

        console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(_FORMAT)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            logger.addHandler(_file_handler(log_file, formatter))

    _managed_loggers.add(name)
    return logger


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Apply a logging config section to every logger made by get_logger.

    Args:
        level (str): New level name; unknown names fall back to INFO.
        log_file (str, optional): Extra file every managed logger also writes to.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(_FORMAT)
    target = os.path.abspath(log_file) if log_file else None

    for name in sorted(_managed_loggers):
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        if target and not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == target
            for h in logger.handlers
        ):
            logger.addHandler(_file_handler(target, formatter))
