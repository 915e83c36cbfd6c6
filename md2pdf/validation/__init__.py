"""Request models for the generation API.

The request validator lives in ``md2pdf.validation.validator``.
"""
from md2pdf.validation.models import (
    FONT_IDS,
    FONT_OPTIONS,
    FONT_SIZE_DEFAULT,
    TEMPLATE_IDS,
    BrowseEntry,
    BrowseResponse,
    GenerateRequest,
    GenerateResponse,
    InitialState,
    PreviewRequest,
    PreviewResponse,
)

__all__ = [
    "FONT_IDS",
    "FONT_OPTIONS",
    "FONT_SIZE_DEFAULT",
    "TEMPLATE_IDS",
    "BrowseEntry",
    "BrowseResponse",
    "GenerateRequest",
    "GenerateResponse",
    "InitialState",
    "PreviewRequest",
    "PreviewResponse",
]
