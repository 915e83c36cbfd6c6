"""Pagination data model: content nodes, pages and pagination runs."""

from dataclasses import dataclass, field
from hashlib import sha256
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

OVERSIZED_CLASS = "oversized-block"
PAGE_CLASS = "preview-page"
PAGE_CONTENT_CLASS = "doc-flow preview-page-content"


@dataclass
class ContentNode:
    """One top-level node of the flowed content.

    ``markup`` is the node's serialised HTML exactly as it appeared in the
    flowed content. ``tag`` is None for text nodes.
    """

    index: int
    markup: str
    tag: Optional[str] = None
    oversized: bool = False

    @property
    def is_element(self) -> bool:
        return self.tag is not None

    @property
    def is_blank(self) -> bool:
        """Whitespace-only text between blocks; it takes no layout space."""
        return self.tag is None and not self.markup.strip()

    def render(self) -> str:
        """Markup placed on a page; flagged elements carry the oversized class."""
        if not self.oversized or not self.is_element:
            return self.markup
        soup = BeautifulSoup(self.markup, "html.parser")
        element = next((child for child in soup.contents if isinstance(child, Tag)), None)
        if element is None:
            return self.markup
        classes = element.get("class") or []
        if OVERSIZED_CLASS not in classes:
            element["class"] = [*classes, OVERSIZED_CLASS]
        return str(soup)


@dataclass
class Page:
    """A fixed-size page container holding whole content nodes."""

    number: int
    capacity: float
    nodes: List[ContentNode] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def has_content(self) -> bool:
        return any(not node.is_blank for node in self.nodes)

    @property
    def has_oversized(self) -> bool:
        return any(node.oversized for node in self.nodes)

    def inner_html(self) -> str:
        return "".join(node.render() for node in self.nodes)

    def render(self) -> str:
        return (
            f'<section class="{PAGE_CLASS}" data-page="{self.number}">'
            f'<div class="{PAGE_CONTENT_CLASS}">{self.inner_html()}</div>'
            "</section>"
        )


@dataclass(frozen=True)
class PaginationKey:
    """Everything page capacity visually depends on."""

    content_digest: str
    template_id: str
    font_id: str
    font_size: int
    viewport_width: int
    viewport_height: int


@dataclass
class PaginationRun:
    """Snapshot binding a pagination key to the resulting pages."""

    key: PaginationKey
    pages: List[Page]
    sequence: int = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def oversized_count(self) -> int:
        return sum(1 for page in self.pages for node in page.nodes if node.oversized)

    def nodes(self) -> List[ContentNode]:
        return [node for page in self.pages for node in page.nodes]

    def render(self) -> str:
        return "".join(page.render() for page in self.pages)


def split_flowed_content(html: str) -> List[ContentNode]:
    """
    Split flowed HTML into its top-level nodes, in document order.

    Whitespace-only text between block elements is kept as text nodes so
    that concatenating every node's markup reproduces the content.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    nodes: List[ContentNode] = []
    for child in soup.contents:
        if isinstance(child, Tag):
            nodes.append(ContentNode(index=len(nodes), markup=str(child), tag=child.name))
        elif isinstance(child, NavigableString):
            nodes.append(ContentNode(index=len(nodes), markup=str(child.output_ready()), tag=None))
    return nodes


def content_digest(html: str) -> str:
    return sha256((html or "").encode("utf-8")).hexdigest()
