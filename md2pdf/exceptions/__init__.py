"""Custom exceptions for the md2pdf rendering pipeline.

All exceptions include a stable error code and a human-readable message so
the web server and CLI can surface them without type inspection.
"""

from md2pdf.exceptions.base import (
    Md2PdfError,
    InputError,
    ValidationError,
    ConflictError,
    RenderingError,
    WriteError,
    ConfigurationError,
    RegistryError,
)
from md2pdf.exceptions.template import TemplateNotFoundError
from md2pdf.exceptions.session import InvalidSessionStateError

__all__ = [
    "Md2PdfError",
    "InputError",
    "ValidationError",
    "ConflictError",
    "RenderingError",
    "WriteError",
    "ConfigurationError",
    "RegistryError",
    "TemplateNotFoundError",
    "InvalidSessionStateError",
]
