"""Centralized logging configuration for divvy.

Two public helpers:

- ``configure_logging(...)``: attach a single ``RichHandler`` (stderr) to the
  package root logger (``"divvy"``). Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger by name, ensuring the package root
  logger has at least a ``NullHandler`` attached when not configured.

Library modules never attach their own handlers and never print diagnostics;
they call ``get_logger(__name__)`` and rely on the CLI configuration.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER_NAME = "divvy"
LOG_LEVEL_ENV = "DIVVY_LOG_LEVEL"

_configured = False


def parse_level(level: int | str | None) -> int:
    """Resolve a logging level from an int, a level name, or the environment.

    Args:
        level: Level as int or name (e.g. "INFO"). None falls back to the
            DIVVY_LOG_LEVEL environment variable, then INFO.

    Returns:
        Numeric logging level.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(level: int | str | None = None, verbose: bool = False) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Logging level. None uses DIVVY_LOG_LEVEL, then INFO.
        verbose: Force DEBUG regardless of level.
    """
    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else parse_level(level))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the divvy package root.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    root = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
