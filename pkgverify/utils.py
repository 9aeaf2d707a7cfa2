"""
Utility functions for the package verifier.

Logging setup and size formatting.
"""

import os
import sys
import logging
from typing import Optional


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        format_string: Optional format string

    Returns:
        Configured logger
    """
    if format_string is None:
        format_string = "%(message)s"

    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(format_string))
    handlers.append(console_handler)

    # File handler
    if log_file:
        log_file = os.path.expanduser(log_file)
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(format_string))
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )

    return logging.getLogger("pkgverify")


def format_kilobytes(bytes_count: int) -> str:
    """
    Format a byte count as kilobytes with two decimals.

    Args:
        bytes_count: Size in bytes

    Returns:
        Formatted size string (e.g., "1.50 KB")
    """
    return f"{bytes_count / 1024:.2f} KB"
