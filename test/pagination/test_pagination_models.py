"""Tests for content splitting and page markup."""

from md2pdf.pagination import ContentNode, Page, PaginationKey, PaginationRun, split_flowed_content
from md2pdf.pagination.models import OVERSIZED_CLASS, content_digest


def test_split_keeps_top_level_nodes_in_order():
    html = "<h1>Title</h1>\n<p>One <em>two</em></p>\n<ul><li>a</li></ul>\n"

    nodes = split_flowed_content(html)

    assert [node.tag for node in nodes if node.is_element] == ["h1", "p", "ul"]
    assert [node.index for node in nodes] == list(range(len(nodes)))
    assert "".join(node.markup for node in nodes) == html


def test_split_empty_content():
    assert split_flowed_content("") == []


def test_oversized_node_gets_marker_class():
    node = ContentNode(index=0, markup='<table class="wide"><tr><td>x</td></tr></table>', tag="table")
    node.oversized = True

    rendered = node.render()

    assert 'class="wide oversized-block"' in rendered


def test_text_node_is_rendered_unchanged_when_flagged():
    node = ContentNode(index=0, markup="loose text", tag=None, oversized=True)

    assert node.render() == "loose text"


def test_page_markup_is_fixed_size_container():
    page = Page(number=2, capacity=500.0, nodes=[ContentNode(index=0, markup="<p>x</p>", tag="p")])

    assert page.render() == (
        '<section class="preview-page" data-page="2">'
        '<div class="doc-flow preview-page-content"><p>x</p></div>'
        "</section>"
    )


def test_run_counts_pages_and_oversized_nodes():
    key = PaginationKey(
        content_digest=content_digest("<p>x</p>"),
        template_id="clean",
        font_id="default",
        font_size=0,
        viewport_width=1280,
        viewport_height=900,
    )
    flagged = ContentNode(index=1, markup="<div>big</div>", tag="div", oversized=True)
    run = PaginationRun(
        key=key,
        pages=[
            Page(number=1, capacity=10, nodes=[ContentNode(index=0, markup="<p>x</p>", tag="p")]),
            Page(number=2, capacity=10, nodes=[flagged]),
        ],
    )

    assert run.page_count == 2
    assert run.oversized_count == 1
    assert OVERSIZED_CLASS in run.render()
    assert [node.index for node in run.nodes()] == [0, 1]


def test_content_digest_is_stable():
    assert content_digest("<p>a</p>") == content_digest("<p>a</p>")
    assert content_digest("<p>a</p>") != content_digest("<p>b</p>")
