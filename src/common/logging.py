"""Logging configuration for the SEO content agent.

Two kinds of loggers exist in the package: named service loggers created via
setup_logging() (writers, workflow, scheduler) and plain module loggers from
logging.getLogger(__name__). configure_cli_logging() gives the latter a
handler when running from the command line.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_from_env(default: int) -> int:
    name = os.getenv("LOG_LEVEL", "").upper()
    if not name:
        return default
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default


def _stdout_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "seo_agent",
) -> logging.Logger:
    """Configure and return a named service logger.

    LOG_LEVEL in the environment overrides ``level``. Calling this twice for
    the same name returns the already configured logger.

    Args:
        level: Logging level (default INFO).
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        return logger

    level = _level_from_env(level)
    logger.setLevel(level)
    logger.addHandler(_stdout_handler(level))
    logger.propagate = False

    return logger


def configure_cli_logging(verbose: bool = False) -> None:
    """Attach a stdout handler to the ``src`` package logger for CLI runs."""
    level = logging.DEBUG if verbose else _level_from_env(logging.INFO)
    package_logger = logging.getLogger("src")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        package_logger.addHandler(_stdout_handler(level))
