"""Document composition and browser-backed printing."""
from md2pdf.rendering.composer import DocumentComposer
from md2pdf.rendering.printer import ChromiumPdfPrinter, PdfPrinter

__all__ = ["DocumentComposer", "ChromiumPdfPrinter", "PdfPrinter"]
