"""Layout measurers used by the paginator.

A measurer answers two questions for a page context: how tall a page's
content box is (its capacity) and how tall a given run of nodes renders
inside it.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional, Sequence

from md2pdf.pagination.models import ContentNode

PAGE_CONTENT_SELECTOR = "#previewPages .preview-page-content"
PAGE_SELECTOR = "#previewPages .preview-page"

_CAPACITY_SCRIPT = """
([selector, pageSelector, pageNumber]) => {
  const page = document.querySelector(pageSelector);
  const content = document.querySelector(selector);
  page.setAttribute('data-page', String(pageNumber));
  content.innerHTML = '';
  return content.clientHeight || Math.floor(parseFloat(getComputedStyle(content).height)) || 0;
}
"""

_RESET_SCRIPT = """
([selector, markup]) => {
  const content = document.querySelector(selector);
  content.innerHTML = markup;
  return content.scrollHeight;
}
"""

_APPEND_SCRIPT = """
([selector, markup]) => {
  const content = document.querySelector(selector);
  content.insertAdjacentHTML('beforeend', markup);
  return content.scrollHeight;
}
"""


class LayoutMeasurer(ABC):
    """Measures page capacity and rendered content height."""

    @abstractmethod
    async def page_capacity(self, page_number: int) -> float:
        """Height available for content on the given 1-indexed page."""

    @abstractmethod
    async def content_height(self, nodes: Sequence[ContentNode], page_number: int) -> float:
        """Rendered height of ``nodes`` laid out together on one page."""


class StaticLayoutMeasurer(LayoutMeasurer):
    """Deterministic measurer with fixed heights per tag name.

    Heights are additive, so margins never collapse. Useful for tests and
    for rough page-count estimates without a browser.
    """

    DEFAULT_TAG_HEIGHTS: Dict[str, float] = {
        "h1": 48.0,
        "h2": 40.0,
        "h3": 32.0,
        "h4": 28.0,
        "h5": 24.0,
        "h6": 24.0,
        "p": 24.0,
        "ul": 72.0,
        "ol": 72.0,
        "li": 24.0,
        "blockquote": 48.0,
        "pre": 96.0,
        "table": 120.0,
        "hr": 16.0,
        "div": 160.0,
        "img": 200.0,
    }

    def __init__(
        self,
        capacity: float = 1000.0,
        tag_heights: Optional[Mapping[str, float]] = None,
        default_height: float = 24.0,
        text_height: float = 0.0,
        page_capacities: Optional[Mapping[int, float]] = None,
    ):
        self.capacity = capacity
        self.tag_heights = dict(self.DEFAULT_TAG_HEIGHTS)
        if tag_heights:
            self.tag_heights.update(tag_heights)
        self.default_height = default_height
        self.text_height = text_height
        self.page_capacities = dict(page_capacities or {})
        self.capacity_requests: List[int] = []

    def node_height(self, node: ContentNode) -> float:
        if not node.is_element:
            return self.text_height if node.markup.strip() else 0.0
        return self.tag_heights.get(node.tag or "", self.default_height)

    async def page_capacity(self, page_number: int) -> float:
        self.capacity_requests.append(page_number)
        return self.page_capacities.get(page_number, self.capacity)

    async def content_height(self, nodes: Sequence[ContentNode], page_number: int) -> float:
        return sum(self.node_height(node) for node in nodes)


class BrowserLayoutMeasurer(LayoutMeasurer):
    """Measures inside a live Chromium page holding the composed shell.

    The page must contain one empty page container (see
    ``DocumentComposer.compose_measuring_shell``). Capacity is the content
    box's ``clientHeight``; content height is its ``scrollHeight`` once the
    nodes are inserted. Consecutive calls that only add a node are applied
    incrementally.
    """

    def __init__(self, page):
        """
        Args:
            page: A Playwright ``Page`` with the measuring shell loaded
        """
        self.page = page
        self._placed: List[int] = []

    async def page_capacity(self, page_number: int) -> float:
        self._placed = []
        capacity = await self.page.evaluate(
            _CAPACITY_SCRIPT, [PAGE_CONTENT_SELECTOR, PAGE_SELECTOR, page_number]
        )
        return float(capacity)

    async def content_height(self, nodes: Sequence[ContentNode], page_number: int) -> float:
        indices = [node.index for node in nodes]
        if nodes and indices[:-1] == self._placed:
            height = await self.page.evaluate(
                _APPEND_SCRIPT, [PAGE_CONTENT_SELECTOR, nodes[-1].render()]
            )
        else:
            markup = "".join(node.render() for node in nodes)
            height = await self.page.evaluate(_RESET_SCRIPT, [PAGE_CONTENT_SELECTOR, markup])
        self._placed = indices
        return float(height)
