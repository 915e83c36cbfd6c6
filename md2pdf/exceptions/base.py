"""Base exception classes for md2pdf.

Every error carries a machine-readable ``code``, a human-readable ``message``
and an optional ``details`` dictionary so callers at the HTTP or CLI boundary
can report it without inspecting the exception type.
"""

from typing import Any, Dict, Optional


class Md2PdfError(Exception):
    """Base class for all md2pdf errors."""

    default_code = "MD2PDF_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class InputError(Md2PdfError):
    """Source path is missing, unreadable or not a Markdown file."""

    default_code = "INPUT_ERROR"


class ValidationError(Md2PdfError):
    """A generation request failed validation."""

    default_code = "VALIDATION_ERROR"


class ConflictError(Md2PdfError):
    """The output file already exists and overwrite was not confirmed."""

    default_code = "OVERWRITE_REQUIRED"

    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "A file already exists at this path.",
            details={"path": path, **(details or {})},
        )
        self.path = path


class RenderingError(Md2PdfError):
    """A sub-render (e.g. a diagram) failed."""

    default_code = "RENDERING_ERROR"


class WriteError(Md2PdfError):
    """Directory creation or PDF printing failed."""

    default_code = "WRITE_FAILED"


class ConfigurationError(Md2PdfError):
    """Configuration or required asset is missing."""

    default_code = "CONFIGURATION_ERROR"


class RegistryError(Md2PdfError):
    """Template registry lookup or load failure."""

    default_code = "REGISTRY_ERROR"


__all__ = [
    "Md2PdfError",
    "InputError",
    "ValidationError",
    "ConflictError",
    "RenderingError",
    "WriteError",
    "ConfigurationError",
    "RegistryError",
]
