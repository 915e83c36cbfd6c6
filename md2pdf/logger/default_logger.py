"""Default logger backed by the standard logging module."""

import logging
from typing import Any, Dict, Optional

from md2pdf.logger.interface import Logger


def format_fields(message: str, fields: Dict[str, Any]) -> str:
    """Append ``key=value`` pairs to a log message."""
    if not fields:
        return message
    rendered = " ".join(f"{key}={value}" for key, value in fields.items())
    return f"{message} | {rendered}"


class DefaultLogger(Logger):
    """Logger that forwards to a named ``logging.Logger``.

    Handlers and formatting are left to the host application.
    """

    def __init__(self, name: str = "md2pdf", level: Optional[int] = None):
        self._logger = logging.getLogger(name)
        if level is not None:
            self._logger.setLevel(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(format_fields(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(format_fields(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(format_fields(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(format_fields(message, kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(format_fields(message, kwargs))
