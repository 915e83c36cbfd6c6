"""Print-to-PDF through the browser engine."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from md2pdf.exceptions import WriteError
from md2pdf.logger import Logger
from md2pdf.rendering.browser import open_browser_page, wait_for_settle

ZERO_MARGIN = {"top": "0", "right": "0", "bottom": "0", "left": "0"}


class PdfPrinter(ABC):
    """Turns a printable HTML document into a PDF file."""

    @abstractmethod
    async def print_pdf(self, html: str, output_path: Path, page_format: str) -> None:
        """
        Print ``html`` to ``output_path``.

        Raises:
            WriteError: If the engine fails to load or print the document
        """


class ChromiumPdfPrinter(PdfPrinter):
    """Prints with headless Chromium.

    Margins are zero because page containers already include their margins;
    the document's own ``@page`` rules decide the page size.
    """

    def __init__(
        self,
        logger: Logger,
        executable_path: Optional[str] = None,
        settle_ms: Optional[int] = None,
    ):
        self.logger = logger
        self.executable_path = executable_path
        self.settle_ms = settle_ms

    async def print_pdf(self, html: str, output_path: Path, page_format: str) -> None:
        try:
            async with open_browser_page(executable_path=self.executable_path) as page:
                await page.set_content(html, wait_until="load")
                await wait_for_settle(page, self.settle_ms)
                await page.pdf(
                    path=str(output_path),
                    format=page_format,
                    print_background=True,
                    prefer_css_page_size=True,
                    margin=ZERO_MARGIN,
                )
        except (PlaywrightError, OSError) as e:
            self.logger.error("Browser print failed", output_path=str(output_path), error=str(e))
            raise WriteError(str(e) or "Failed to generate PDF.") from e

        self.logger.info("Printed PDF", output_path=str(output_path), page_format=page_format)
