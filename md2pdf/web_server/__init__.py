"""Local session web server."""
from md2pdf.web_server.web_server import Md2PdfWebServer

__all__ = ["Md2PdfWebServer"]
