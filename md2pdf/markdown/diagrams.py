"""Diagram rendering for fenced diagram blocks."""

import re
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from md2pdf.config import Config
from md2pdf.exceptions import RenderingError
from md2pdf.logger import Logger

DIAGRAM_LANGUAGES = frozenset({"mermaid"})

_XML_PROLOG = re.compile(r"^\s*<\?xml[^>]*\?>\s*", re.IGNORECASE)


class DiagramRenderer(ABC):
    """Renders diagram source to inline SVG markup."""

    @abstractmethod
    async def render(self, language: str, source: str) -> str:
        """
        Render a diagram.

        Raises:
            RenderingError: If the diagram cannot be rendered
        """


class KrokiDiagramRenderer(DiagramRenderer):
    """Renders diagrams through a Kroki service (``POST /<language>/svg``)."""

    def __init__(
        self,
        logger: Logger,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            logger: Logger instance
            base_url: Kroki base URL (default from config)
            timeout_seconds: Request timeout (default from config)
            transport: Optional httpx transport, used by tests
        """
        self.logger = logger
        self.base_url = (base_url or Config.get_kroki_url()).rstrip("/")
        self.timeout_seconds = (
            Config.get_diagram_timeout() if timeout_seconds is None else timeout_seconds
        )
        self.transport = transport

    async def render(self, language: str, source: str) -> str:
        url = f"{self.base_url}/{language}/svg"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(
                    url, content=source.encode("utf-8"), headers={"Content-Type": "text/plain"}
                )
        except httpx.HTTPError as e:
            raise RenderingError(
                f"Diagram service request failed: {e}", details={"url": url}
            ) from e

        if response.status_code != 200:
            raise RenderingError(
                f"Diagram service returned HTTP {response.status_code}",
                details={"url": url, "status_code": response.status_code},
            )

        svg = _XML_PROLOG.sub("", response.text)
        if "<svg" not in svg:
            raise RenderingError("Diagram service did not return SVG", details={"url": url})
        return svg.strip()
