"""
Logging utilities for pipesh.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT = "pipesh"


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Replaces any handler installed by an earlier call, so the CLI can apply
    its arguments after modules have already fetched their loggers.

    Args:
        level: Level name, e.g. "DEBUG"
        log_file: Write to this file instead of stderr
        format_string: Custom format string

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_ROOT)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger


def get_logger(name: str = _ROOT) -> logging.Logger:
    """
    Get a logger below the package logger.

    The package logger is configured from the environment on first use.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Configured logger
    """
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        try:
            from .config import ShellConfig

            config = ShellConfig.from_env()
            configure_logging(config.log_level, config.log_file)
        except Exception:
            configure_logging()

    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
