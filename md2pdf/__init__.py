"""md2pdf - Markdown to paginated PDF through a browser layout engine."""

__version__ = "0.1.0"
