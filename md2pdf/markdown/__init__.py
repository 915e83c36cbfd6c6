"""Markdown rendering: source documents, HTML conversion and diagrams."""
from md2pdf.markdown.diagrams import DiagramRenderer, KrokiDiagramRenderer
from md2pdf.markdown.models import MarkdownDocument
from md2pdf.markdown.renderer import ContentRenderer, resolve_image_source

__all__ = [
    "DiagramRenderer",
    "KrokiDiagramRenderer",
    "MarkdownDocument",
    "ContentRenderer",
    "resolve_image_source",
]
