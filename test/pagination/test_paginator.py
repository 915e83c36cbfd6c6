"""Tests for greedy first-fit pagination with a deterministic measurer."""

import pytest

from md2pdf.pagination import (
    ContentNode,
    Paginator,
    StaticLayoutMeasurer,
    split_flowed_content,
)
from md2pdf.markdown import ContentRenderer
from md2pdf.pagination.models import OVERSIZED_CLASS

EPSILON = 1.0


def make_nodes(*tags):
    return [ContentNode(index=i, markup=f"<{tag}>n{i}</{tag}>", tag=tag) for i, tag in enumerate(tags)]


@pytest.fixture
def paginator(logger) -> Paginator:
    return Paginator(logger, epsilon=EPSILON)


def flatten(pages):
    return [node.markup for page in pages for node in page.nodes]


@pytest.mark.asyncio
async def test_zero_nodes_yield_one_empty_page(paginator):
    pages = await paginator.paginate([], StaticLayoutMeasurer(capacity=100))

    assert len(pages) == 1
    assert pages[0].number == 1
    assert pages[0].is_empty


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [24, 50, 100, 250, 1000])
async def test_pagination_preserves_every_node_in_order(paginator, capacity):
    nodes = make_nodes("h1", "p", "p", "ul", "p", "h2", "p", "blockquote", "p", "p")
    measurer = StaticLayoutMeasurer(capacity=capacity)

    pages = await paginator.paginate(nodes, measurer)

    assert flatten(pages) == [node.markup for node in nodes]
    assert [page.number for page in pages] == list(range(1, len(pages) + 1))


@pytest.mark.asyncio
async def test_pages_respect_capacity_unless_oversized(paginator):
    nodes = make_nodes("h1", "p", "table", "p", "div", "p", "p", "pre", "p")
    measurer = StaticLayoutMeasurer(capacity=130)

    pages = await paginator.paginate(nodes, measurer)

    for page in pages:
        if page.has_oversized:
            continue
        height = sum(measurer.node_height(node) for node in page.nodes)
        assert height <= page.capacity + EPSILON


@pytest.mark.asyncio
async def test_oversized_node_is_alone_and_flagged(paginator):
    nodes = make_nodes("p", "div", "p")
    measurer = StaticLayoutMeasurer(capacity=100)

    pages = await paginator.paginate(nodes, measurer)

    assert len(pages) == 3
    oversized_page = pages[1]
    assert len(oversized_page.nodes) == 1
    assert oversized_page.nodes[0].tag == "div"
    assert oversized_page.nodes[0].oversized is True
    assert OVERSIZED_CLASS in oversized_page.render()
    assert not pages[0].has_oversized
    assert not pages[2].has_oversized


@pytest.mark.asyncio
async def test_oversized_first_node_stays_on_first_page(paginator):
    nodes = make_nodes("div", "p")
    measurer = StaticLayoutMeasurer(capacity=100)

    pages = await paginator.paginate(nodes, measurer)

    assert len(pages) == 2
    assert pages[0].nodes[0].oversized is True
    assert [node.tag for node in pages[1].nodes] == ["p"]


@pytest.mark.asyncio
async def test_overflow_within_epsilon_is_tolerated(logger):
    nodes = make_nodes("p", "p")
    measurer = StaticLayoutMeasurer(capacity=47.5)

    pages = await Paginator(logger, epsilon=1.0).paginate(nodes, measurer)

    assert len(pages) == 1


@pytest.mark.asyncio
async def test_capacity_is_requested_for_every_page(paginator):
    nodes = make_nodes("p", "p", "p")
    measurer = StaticLayoutMeasurer(capacity=100, page_capacities={1: 24, 2: 48})

    pages = await paginator.paginate(nodes, measurer)

    assert measurer.capacity_requests == [1, 2]
    assert [len(page.nodes) for page in pages] == [1, 2]
    assert [page.capacity for page in pages] == [24, 48]


@pytest.mark.asyncio
async def test_repagination_is_idempotent(paginator):
    nodes = make_nodes("h1", "p", "table", "p", "div", "p")
    measurer = StaticLayoutMeasurer(capacity=150)

    first = await paginator.paginate(nodes, measurer)
    second = await paginator.paginate(nodes, measurer)

    assert [page.render() for page in first] == [page.render() for page in second]


@pytest.mark.asyncio
async def test_input_nodes_are_not_mutated(paginator):
    nodes = make_nodes("div")
    await paginator.paginate(nodes, StaticLayoutMeasurer(capacity=10))

    assert nodes[0].oversized is False


@pytest.mark.asyncio
async def test_single_page_document_from_heading_and_paragraph(paginator):
    nodes = split_flowed_content("<h1>Title</h1>\n<p>Body text.</p>\n")

    pages = await paginator.paginate(nodes, StaticLayoutMeasurer(capacity=1000))

    assert len(pages) == 1
    assert [node.tag for node in pages[0].nodes if node.is_element] == ["h1", "p"]


@pytest.mark.asyncio
async def test_one_node_over_capacity_moves_to_second_page(paginator):
    # Four 24px paragraphs fill a 96px page exactly; the fifth overflows.
    html = "".join(f"<p>para {i}</p>" for i in range(5))
    nodes = split_flowed_content(html)

    pages = await paginator.paginate(nodes, StaticLayoutMeasurer(capacity=96))

    assert len(pages) == 2
    assert len(pages[0].nodes) == 4
    assert [node.markup for node in pages[1].nodes] == ["<p>para 4</p>"]
    assert not pages[1].has_oversized


@pytest.mark.asyncio
async def test_trailing_newline_after_oversized_block_adds_no_page(paginator):
    nodes = split_flowed_content("<p>a</p>\n<div>big</div>\n")

    pages = await paginator.paginate(nodes, StaticLayoutMeasurer(capacity=100))

    assert len(pages) == 2
    assert [node.tag for node in pages[1].nodes] == ["div", None]
    assert pages[1].nodes[0].oversized is True
    assert all(page.has_content for page in pages)


@pytest.mark.asyncio
async def test_leading_whitespace_does_not_leave_a_blank_first_page(paginator):
    nodes = split_flowed_content("\n<div>big</div>")

    pages = await paginator.paginate(nodes, StaticLayoutMeasurer(capacity=100))

    assert len(pages) == 1
    assert pages[0].has_oversized


@pytest.mark.asyncio
async def test_rendered_markdown_with_oversized_last_block(paginator, logger):
    html = await ContentRenderer(logger).render("Intro\n\n```\nline\n```\n", None)
    nodes = split_flowed_content(html)
    assert nodes[-1].is_blank

    pages = await paginator.paginate(nodes, StaticLayoutMeasurer(capacity=80))

    assert len(pages) == 2
    assert all(page.has_content for page in pages)
    assert [node.tag for node in pages[1].nodes if node.is_element] == ["pre"]
    assert pages[1].has_oversized
    assert flatten(pages) == [node.markup for node in nodes]
