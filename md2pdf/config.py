"""Centralized configuration and defaults for md2pdf.

All settings are read from the environment at call time.
"""

# =============================================================================
# ENVIRONMENT VARIABLES REFERENCE
# =============================================================================

# Layout & Pagination
# -------------------
# MD2PDF_PAGINATION_EPSILON: Overflow tolerance in layout pixels (default: 1.0)
# MD2PDF_REPAGINATE_DELAY_MS: Quiescence window for debounced re-pagination
#   (default: 180)
# MD2PDF_VIEWPORT_WIDTH / MD2PDF_VIEWPORT_HEIGHT: Measuring viewport
#   (default: 1280 x 900)
#
# Font Size Bounds
# ----------------
# MD2PDF_FONT_SIZE_MIN: Smallest accepted font size override (default: 12)
# MD2PDF_FONT_SIZE_MAX: Largest accepted font size override (default: 24)
#
# Rendering Engine
# ----------------
# CHROME_PATH: Chromium-based browser executable (default: auto-detect, then
#   the Playwright-managed Chromium)
# MD2PDF_PRINT_SETTLE_MS: Wait after load before printing (default: 100)
# MD2PDF_KROKI_URL: Diagram rendering service (default: https://kroki.io)
# MD2PDF_DIAGRAM_TIMEOUT: Diagram request timeout in seconds (default: 10)
#
# Assets
# ------
# MD2PDF_CONTENT_DIR: Directory holding templates, style sheets and page
#   templates (default: the package's content/ directory)
#
# Development & Testing
# ---------------------
# MD2PDF_LOG_LEVEL: Logging verbosity (default: INFO)
#   Values: DEBUG, INFO, WARNING, ERROR, CRITICAL

import os
from pathlib import Path
from typing import Any, Dict

# =============================================================================
# CONFIGURATION DEFAULTS
# =============================================================================

DEFAULT_FONT_SIZE_MIN = 12
DEFAULT_FONT_SIZE_MAX = 24
DEFAULT_PAGINATION_EPSILON = 1.0
DEFAULT_REPAGINATE_DELAY_MS = 180
DEFAULT_PRINT_SETTLE_MS = 100
DEFAULT_VIEWPORT_WIDTH = 1280
DEFAULT_VIEWPORT_HEIGHT = 900
DEFAULT_KROKI_URL = "https://kroki.io"
DEFAULT_DIAGRAM_TIMEOUT_SECONDS = 10
DEFAULT_LOG_LEVEL = "INFO"

PACKAGE_CONTENT_DIR = Path(__file__).parent / "content"


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


class Config:
    """Environment-backed configuration accessors."""

    @classmethod
    def get_content_dir(cls) -> Path:
        return Path(os.environ.get("MD2PDF_CONTENT_DIR", str(PACKAGE_CONTENT_DIR)))

    @classmethod
    def get_font_size_bounds(cls) -> tuple:
        return (
            _env_int("MD2PDF_FONT_SIZE_MIN", DEFAULT_FONT_SIZE_MIN),
            _env_int("MD2PDF_FONT_SIZE_MAX", DEFAULT_FONT_SIZE_MAX),
        )

    @classmethod
    def get_pagination_epsilon(cls) -> float:
        return _env_float("MD2PDF_PAGINATION_EPSILON", DEFAULT_PAGINATION_EPSILON)

    @classmethod
    def get_repaginate_delay(cls) -> float:
        """Debounce delay in seconds."""
        return _env_int("MD2PDF_REPAGINATE_DELAY_MS", DEFAULT_REPAGINATE_DELAY_MS) / 1000.0

    @classmethod
    def get_print_settle_ms(cls) -> int:
        return _env_int("MD2PDF_PRINT_SETTLE_MS", DEFAULT_PRINT_SETTLE_MS)

    @classmethod
    def get_viewport(cls) -> Dict[str, int]:
        return {
            "width": _env_int("MD2PDF_VIEWPORT_WIDTH", DEFAULT_VIEWPORT_WIDTH),
            "height": _env_int("MD2PDF_VIEWPORT_HEIGHT", DEFAULT_VIEWPORT_HEIGHT),
        }

    @classmethod
    def get_kroki_url(cls) -> str:
        return os.environ.get("MD2PDF_KROKI_URL", DEFAULT_KROKI_URL).rstrip("/")

    @classmethod
    def get_diagram_timeout(cls) -> float:
        return _env_float("MD2PDF_DIAGRAM_TIMEOUT", DEFAULT_DIAGRAM_TIMEOUT_SECONDS)

    @classmethod
    def get_chrome_path(cls) -> str:
        return os.environ.get("CHROME_PATH", "")

    @classmethod
    def get_log_level(cls) -> str:
        return os.environ.get("MD2PDF_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def get_config_summary() -> Dict[str, Any]:
    """Get a summary of current configuration from environment.

    Returns:
        Dictionary with current configuration values
    """
    font_min, font_max = Config.get_font_size_bounds()
    return {
        "content_dir": str(Config.get_content_dir()),
        "font_size_min": font_min,
        "font_size_max": font_max,
        "pagination_epsilon": Config.get_pagination_epsilon(),
        "repaginate_delay": Config.get_repaginate_delay(),
        "print_settle_ms": Config.get_print_settle_ms(),
        "viewport": Config.get_viewport(),
        "kroki_url": Config.get_kroki_url(),
        "chrome_path": Config.get_chrome_path() or None,
        "log_level": Config.get_log_level(),
    }
