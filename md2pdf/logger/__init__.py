"""
Logger module for md2pdf

This module provides a flexible logging interface that allows users to
drop in their own logger implementations.

Usage:
    from md2pdf.logger import Logger, DefaultLogger

    # Use the default logger
    logger = DefaultLogger()
    logger.info("Preview ready", pages=3)

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            # Your custom implementation
            pass
"""

import logging

from md2pdf.config import Config

from .interface import Logger
from .default_logger import DefaultLogger
from .console_logger import ConsoleLogger


def configured_level() -> int:
    """Logging level named by Config, INFO when the name is not recognised."""
    level = getattr(logging, Config.get_log_level(), None)
    return level if isinstance(level, int) else logging.INFO


# Shared logger instance for modules that just need basic console logging
session_logger: ConsoleLogger = ConsoleLogger(level=configured_level())

__all__ = [
    "Logger",
    "DefaultLogger",
    "ConsoleLogger",
    "session_logger",
    "configured_level",
]
