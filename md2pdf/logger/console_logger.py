"""Console logger writing timestamped lines to stderr."""

import logging
import sys

from md2pdf.logger.default_logger import DefaultLogger

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ConsoleLogger(DefaultLogger):
    """DefaultLogger with its own stderr handler attached."""

    def __init__(self, name: str = "md2pdf.console", level: int = logging.INFO):
        super().__init__(name=name, level=level)
        # Loggers are process-wide; attach the handler only once per name.
        if not any(getattr(h, "_md2pdf_console", False) for h in self._logger.handlers):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            handler._md2pdf_console = True  # type: ignore[attr-defined]
            self._logger.addHandler(handler)
        self._logger.propagate = False

    def set_level(self, level: int) -> None:
        """Change the minimum level emitted by this logger."""
        self._logger.setLevel(level)
