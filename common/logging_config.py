"""
Logging Configuration Module

Provides consistent logging setup across the document engine packages.

Log records go to stderr by default, so that commands printing JSON results
on stdout stay machine-readable.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "doc_engine"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_for(verbose: bool = False, quiet: bool = False) -> int:
    """DEBUG when verbose, WARNING when quiet, otherwise INFO (verbose wins)."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``doc_engine`` logger.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to log file
        format_string: Optional custom format string
        stream: Console stream (default: sys.stderr)

    Returns:
        Configured engine root logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Reconfiguring replaces earlier handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger named ``doc_engine.<name>``, below the engine root logger."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
