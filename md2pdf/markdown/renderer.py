"""Markdown to HTML rendering.

Supports GitHub-style tables, task lists (disabled checkboxes with a
trailing label), inline and block math rendered to static MathML, fenced
code, and diagram fences rendered to inline SVG. Relative image sources are
rewritten to ``file://`` URLs anchored at the document's directory.
"""

import asyncio
import html
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from latex2mathml.converter import convert as latex_to_mathml
from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from md2pdf.exceptions import RenderingError
from md2pdf.logger import Logger
from md2pdf.markdown.diagrams import DIAGRAM_LANGUAGES, DiagramRenderer

_ABSOLUTE_SOURCE = re.compile(r"^(https?:|data:|file:)", re.IGNORECASE)
_URL_PATH_SAFE = "/%:@!$&'()*+,;=~"


def resolve_image_source(src: str, base_dir: str) -> str:
    """
    Resolve an image source against a base directory.

    Absolute http(s)/data/file URLs, empty sources and sources seen without
    a base directory are returned unchanged, as is any source that cannot be
    turned into a URL.
    """
    if not src or _ABSOLUTE_SOURCE.match(src) or not base_dir:
        return src

    normalized = base_dir.replace("\\", "/")
    if not normalized.startswith("/"):
        normalized = f"/{normalized}"
    base_url = f"file://{normalized}" if normalized.endswith("/") else f"file://{normalized}/"

    try:
        parts = urlsplit(urljoin(base_url, src))
        return urlunsplit(parts._replace(path=quote(parts.path, safe=_URL_PATH_SAFE)))
    except ValueError:
        return src


def render_math(content: str, display: bool) -> str:
    """TeX to MathML; unparseable input is shown as escaped TeX."""
    try:
        return latex_to_mathml(content.strip(), display="block" if display else "inline")
    except Exception:
        # latex2mathml raises a variety of parser exceptions.
        return f'<code class="math-error">{html.escape(content)}</code>'


class ContentRenderer:
    """Renders Markdown source to flowed HTML."""

    def __init__(self, logger: Logger, diagram_renderer: Optional[DiagramRenderer] = None):
        """
        Args:
            logger: Logger instance
            diagram_renderer: Renderer for diagram fences (None shows their source)
        """
        self.logger = logger
        self.diagram_renderer = diagram_renderer
        self._md = self._build_parser()

    def _build_parser(self) -> MarkdownIt:
        md = MarkdownIt("commonmark", {"html": True, "linkify": True, "typographer": True})
        md.enable(["table", "strikethrough", "linkify", "replacements", "smartquotes"])
        md.use(tasklists_plugin, enabled=False, label=True, label_after=True)
        md.use(dollarmath_plugin, double_inline=True)

        default_image = md.renderer.rules["image"]
        default_fence = md.renderer.rules["fence"]

        def image_rule(self, tokens, idx, options, env):
            token = tokens[idx]
            src = token.attrGet("src")
            if isinstance(src, str):
                token.attrSet("src", resolve_image_source(src, env.get("base_dir", "")))
            return default_image(tokens, idx, options, env)

        def fence_rule(self, tokens, idx, options, env):
            token = tokens[idx]
            info = token.info.strip().split(maxsplit=1)[0].lower() if token.info else ""
            if info in DIAGRAM_LANGUAGES:
                diagrams: List[Tuple[str, str]] = env.setdefault("diagrams", [])
                diagrams.append((info, token.content))
                return f'<div class="diagram" data-diagram="{len(diagrams) - 1}"></div>\n'
            return default_fence(tokens, idx, options, env)

        def math_inline_rule(self, tokens, idx, options, env):
            return render_math(tokens[idx].content, display=False)

        def math_block_rule(self, tokens, idx, options, env):
            return f'<div class="math-block">{render_math(tokens[idx].content, display=True)}</div>\n'

        md.add_render_rule("image", image_rule)
        md.add_render_rule("fence", fence_rule)
        md.add_render_rule("math_inline", math_inline_rule)
        md.add_render_rule("math_inline_double", math_block_rule)
        md.add_render_rule("math_block", math_block_rule)
        md.add_render_rule("math_block_label", math_block_rule)
        return md

    async def render(self, source: str, base_dir: Union[str, Path, None]) -> str:
        """
        Render Markdown to HTML.

        Diagram fences are rendered concurrently and all of them have settled
        (rendered or replaced by their source) before this returns.

        Args:
            source: Markdown source text
            base_dir: Directory relative image sources are resolved against

        Returns:
            Flowed HTML
        """
        env: Dict = {"base_dir": str(base_dir) if base_dir else ""}
        flowed = self._md.render(source, env)

        diagrams: List[Tuple[str, str]] = env.get("diagrams", [])
        if diagrams:
            rendered = await asyncio.gather(
                *(self._render_diagram(language, code) for language, code in diagrams)
            )
            for index, markup in enumerate(rendered):
                flowed = flowed.replace(
                    f'<div class="diagram" data-diagram="{index}"></div>', markup, 1
                )

        self.logger.debug("Rendered markdown", chars=len(source), diagrams=len(diagrams))
        return flowed

    async def _render_diagram(self, language: str, code: str) -> str:
        fallback = (
            f'<pre class="diagram-source"><code class="language-{language}">'
            f"{html.escape(code)}</code></pre>"
        )
        if self.diagram_renderer is None:
            return fallback
        try:
            svg = await self.diagram_renderer.render(language, code)
        except RenderingError as e:
            self.logger.warning("Diagram rendering failed, showing source", error=str(e))
            return fallback
        return f'<div class="diagram diagram-{language}">{svg}</div>'
