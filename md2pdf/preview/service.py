"""Preview service: renders the Markdown once and paginates it on demand."""

import asyncio
from dataclasses import dataclass
from typing import AsyncContextManager, Callable, Dict, Optional

from md2pdf.config import Config
from md2pdf.exceptions import ValidationError
from md2pdf.logger import Logger
from md2pdf.markdown import ContentRenderer, MarkdownDocument
from md2pdf.pagination import (
    LayoutMeasurer,
    PaginationKey,
    PaginationRun,
    Paginator,
    RepaginationScheduler,
    split_flowed_content,
)
from md2pdf.pagination.models import content_digest
from md2pdf.rendering import DocumentComposer
from md2pdf.validation.models import FONT_IDS, PreviewRequest
from md2pdf.validation.validator import GenerateRequestValidator

MeasurerFactory = Callable[[str, Dict[str, int]], AsyncContextManager[LayoutMeasurer]]


@dataclass(frozen=True)
class PreviewSettings:
    """Layout-affecting settings of one pagination run."""

    template_id: str
    font_id: str
    font_size: Optional[int]
    viewport_width: int
    viewport_height: int

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @classmethod
    def from_request(cls, request: PreviewRequest) -> "PreviewSettings":
        viewport = Config.get_viewport()
        return cls(
            template_id=request.template_id,
            font_id=request.font_id,
            font_size=request.font_size,
            viewport_width=request.viewport_width or viewport["width"],
            viewport_height=request.viewport_height or viewport["height"],
        )


def _default_measurer_factory(shell_html: str, viewport: Dict[str, int]):
    # Imported lazily so that the preview service can be used without a browser.
    from md2pdf.rendering.browser import open_browser_measurer

    return open_browser_measurer(shell_html, viewport)


class PreviewService:
    """Produces paginated previews for a single Markdown document.

    The Markdown is rendered to flowed HTML once and cached; every
    pagination run re-measures that HTML under the requested settings.
    """

    def __init__(
        self,
        document: MarkdownDocument,
        content_renderer: ContentRenderer,
        paginator: Paginator,
        composer: DocumentComposer,
        logger: Logger,
        measurer_factory: Optional[MeasurerFactory] = None,
        delay: Optional[float] = None,
    ):
        """
        Args:
            document: Markdown source being previewed
            content_renderer: Markdown to HTML renderer
            paginator: Pagination engine
            composer: Document composer, used to build the measuring shell
            logger: Logger instance
            measurer_factory: Opens a layout measurer for a shell document
                (default: headless Chromium)
            delay: Debounce delay in seconds (default from config)
        """
        self.document = document
        self.content_renderer = content_renderer
        self.paginator = paginator
        self.composer = composer
        self.logger = logger
        self.measurer_factory = measurer_factory or _default_measurer_factory
        self.validator = GenerateRequestValidator(
            template_ids=composer.template_registry.template_ids(), font_ids=FONT_IDS
        )
        self.scheduler: RepaginationScheduler[PreviewSettings, PaginationRun] = (
            RepaginationScheduler(self.paginate, logger, delay)
        )
        self._flowed_html: Optional[str] = None
        self._render_lock = asyncio.Lock()

    @property
    def latest(self) -> Optional[PaginationRun]:
        """Most recently committed pagination run."""
        return self.scheduler.latest

    async def flowed_html(self) -> str:
        """Flowed (unpaginated) HTML of the document, rendered on first use."""
        async with self._render_lock:
            if self._flowed_html is None:
                self._flowed_html = await self.content_renderer.render(
                    self.document.source, self.document.base_dir
                )
                self.logger.info(
                    "Rendered markdown",
                    file=self.document.file_name,
                    html_length=len(self._flowed_html),
                )
            return self._flowed_html

    def check_settings(self, settings: PreviewSettings) -> None:
        """
        Raises:
            ValidationError: If the template, font or font size is not recognised
        """
        if settings.template_id not in self.validator.template_ids:
            raise ValidationError(
                "Invalid template selected.",
                details={"field": "templateId", "received": settings.template_id},
            )
        if settings.font_id not in self.validator.font_ids:
            raise ValidationError(
                "Invalid font selected.",
                details={"field": "fontId", "received": settings.font_id},
            )
        if not self.validator.is_valid_font_size(settings.font_size):
            raise ValidationError(
                "Invalid font size.",
                details={"field": "fontSize", "received": settings.font_size},
            )

    async def paginate(self, settings: PreviewSettings, sequence: int = 0) -> PaginationRun:
        """
        Run pagination once, outside the scheduler.

        Args:
            settings: Template, font and viewport to lay out with
            sequence: Trigger sequence recorded on the run

        Returns:
            PaginationRun for the current content under ``settings``
        """
        self.check_settings(settings)
        html = await self.flowed_html()
        nodes = split_flowed_content(html)
        shell = self.composer.compose_measuring_shell(
            settings.template_id, settings.font_id, settings.font_size
        )

        async with self.measurer_factory(shell, settings.viewport) as measurer:
            pages = await self.paginator.paginate(nodes, measurer)

        key = PaginationKey(
            content_digest=content_digest(html),
            template_id=settings.template_id,
            font_id=settings.font_id,
            font_size=settings.font_size,
            viewport_width=settings.viewport_width,
            viewport_height=settings.viewport_height,
        )
        run = PaginationRun(key=key, pages=pages, sequence=sequence)
        self.logger.info(
            "Paginated preview",
            sequence=sequence,
            template_id=settings.template_id,
            pages=run.page_count,
            oversized=run.oversized_count,
        )
        return run

    async def refresh(self, settings: PreviewSettings, debounce: bool = False) -> PaginationRun:
        """
        Request a repagination and wait for a result at least that recent.

        Settings are checked before scheduling so invalid input fails fast.
        """
        self.check_settings(settings)
        if debounce:
            return await self.scheduler.trigger(settings)
        return await self.scheduler.run_now(settings)
