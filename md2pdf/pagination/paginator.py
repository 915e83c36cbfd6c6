"""Greedy first-fit pagination of flowed content into fixed-size pages."""

from dataclasses import replace
from typing import List, Optional, Sequence

from md2pdf.config import Config
from md2pdf.logger import Logger
from md2pdf.pagination.measurers import LayoutMeasurer
from md2pdf.pagination.models import ContentNode, Page


class Paginator:
    """Splits top-level content nodes into pages without splitting any node.

    Nodes are placed in document order. A node that makes the current page
    overflow moves to a fresh page; if it still overflows there it is flagged
    as oversized and left alone on that page.
    """

    def __init__(self, logger: Logger, epsilon: Optional[float] = None):
        """
        Args:
            logger: Logger instance
            epsilon: Overflow tolerance in layout units (default from config)
        """
        self.logger = logger
        self.epsilon = Config.get_pagination_epsilon() if epsilon is None else epsilon

    def _exceeds(self, height: float, capacity: float) -> bool:
        return height > capacity + self.epsilon

    async def _new_page(self, number: int, measurer: LayoutMeasurer) -> Page:
        # Capacity can differ by page position, so it is never cached.
        capacity = await measurer.page_capacity(number)
        return Page(number=number, capacity=capacity)

    async def paginate(
        self, nodes: Sequence[ContentNode], measurer: LayoutMeasurer
    ) -> List[Page]:
        """
        Paginate content nodes.

        Args:
            nodes: Top-level nodes of the flowed content, in document order
            measurer: Layout measurer bound to the active page context

        Returns:
            Pages numbered 1..N; always at least one page
        """
        pages: List[Page] = []
        current = await self._new_page(1, measurer)

        for source in nodes:
            node = replace(source, oversized=False)
            current.nodes.append(node)
            # Whitespace between blocks never opens a page of its own.
            if node.is_blank:
                continue
            height = await measurer.content_height(current.nodes, current.number)
            if not self._exceeds(height, current.capacity):
                continue

            if any(not placed.is_blank for placed in current.nodes[:-1]):
                current.nodes.pop()
                pages.append(current)
                current = await self._new_page(current.number + 1, measurer)
                current.nodes.append(node)
                height = await measurer.content_height(current.nodes, current.number)

            if self._exceeds(height, current.capacity):
                node.oversized = True
                self.logger.warning(
                    "Content node exceeds page capacity",
                    page=current.number,
                    node_index=node.index,
                    tag=node.tag,
                    height=height,
                    capacity=current.capacity,
                )

        if current.has_content or not pages:
            pages.append(current)
        else:
            pages[-1].nodes.extend(current.nodes)

        for number, page in enumerate(pages, start=1):
            page.number = number

        self.logger.debug(
            "Paginated content",
            nodes=len(nodes),
            pages=len(pages),
            oversized=sum(1 for page in pages for node in page.nodes if node.oversized),
        )
        return pages
