"""Centralized logging configuration for the remote gallery."""

import os
import sys
import logging
from typing import Optional

STRUCTURED_FORMAT = (
    "%(asctime)s | %(name)s | %(levelname)-8s | "
    "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "structured":
        return logging.Formatter(STRUCTURED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return logging.Formatter(SIMPLE_FORMAT)


def setup_logger(
    name: str = "remote-gallery",
    level: Optional[str] = None,
    format_type: str = "structured",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Every record goes to stdout; when a log file is given (or LOG_FILE is
    set) the same records are appended to that file as well.

    Args:
        name: Logger name (defaults to "remote-gallery")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")
        log_file: Optional path of a file mirroring the console output

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
        LOG_FILE: Path of the mirror log file
    """
    logger = logging.getLogger(name)

    # Determine log level from parameter, env var, or default
    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_level = getattr(logging, env_level, logging.INFO)

    logger.setLevel(log_level)

    env_format = os.getenv("LOG_FORMAT", format_type).lower()

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_build_formatter(env_format))
        logger.addHandler(handler)

    file_path = log_file or os.getenv("LOG_FILE")
    if file_path:
        add_file_handler(logger, file_path, env_format)

    # Prevent duplicate log messages
    logger.propagate = False
    return logger


def add_file_handler(
    logger: logging.Logger, log_file: str, format_type: str = "structured"
) -> logging.FileHandler:
    """Attach a file sink to ``logger`` unless one for the same path exists."""
    target = os.path.abspath(log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler

    directory = os.path.dirname(target)
    if directory:
        os.makedirs(directory, exist_ok=True)

    file_handler = logging.FileHandler(target, encoding="utf-8")
    file_handler.setFormatter(_build_formatter(format_type))
    logger.addHandler(file_handler)
    return file_handler


def get_logger(name: str = "remote-gallery") -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return setup_logger(name)
