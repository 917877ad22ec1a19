"""
================================================================================
Web Keywords Common Utilities
================================================================================

Shared logging setup and small helpers used by every keyword module.

Exports:
    - init_logger: Initialize the loguru logger with standard settings
    - mask: Obfuscate a value before it is written to a log or report
    - ensure_directory: Create a directory if it does not exist

Usage:
    from webkeywords.common import init_logger, mask

    init_logger(level="DEBUG")
    logger.info(f"Typing '{mask(password)}' into password field")

================================================================================
"""

import os
import sys
from typing import Any, Optional

from loguru import logger


DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    config: Any = None,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        config: Optional ConfigLoader supplying ``logging.*`` values.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/keywords.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    def _cfg(key: str, default: Any) -> Any:
        if config is None:
            return default
        return config.get(key, default)

    logger.remove()

    level = (level or _cfg("logging.level", "INFO")).upper()
    format_string = format_string or _cfg("logging.format", DEFAULT_LOG_FORMAT)

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or _cfg("logging.file", None)
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=_cfg("logging.rotation", "10 MB"),
            retention=_cfg("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


def reset_logger() -> None:
    """Allow init_logger() to run again (used by tests)."""
    global _logger_initialized
    _logger_initialized = False


def mask(value: Optional[str]) -> Optional[str]:
    """
    Keep the first two characters of a value and hide the rest.

    Args:
        value: Value to mask

    Returns:
        Masked value, or None when value is None
    """
    if value is None:
        return None
    text = str(value)
    return text[:2] + "****"


def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


__all__ = [
    "init_logger",
    "reset_logger",
    "mask",
    "ensure_directory",
]
