"""Paginated preview of the input document."""
from md2pdf.preview.service import MeasurerFactory, PreviewService, PreviewSettings

__all__ = ["MeasurerFactory", "PreviewService", "PreviewSettings"]
