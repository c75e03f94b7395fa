"""Logging setup utilities for ledconsole.

Configures logging for the whole application based on the logging
configuration settings.
"""

from __future__ import annotations

import logging
import sys

from ledconsole.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None, console: bool = True) -> None:
    """Configure logging for the ledconsole application.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
        console: Whether to attach a stderr handler. An interactive
                 session owns the whole screen, so it passes False and
                 relies on ``config.file``.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("ledconsole")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    formatter = logging.Formatter(config.format)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    root_logger.info("Logging initialized at %s level", config.level)
