"""md2pdf command line entry point.

Interactive mode starts the local session server and opens the preview in a
browser; the process exits when the session completes or is cancelled.
With ``--output`` the document is paginated and printed without a browser
UI.
"""

import argparse
import asyncio
import logging
import sys
import webbrowser
from dataclasses import dataclass
from typing import List, Optional

import uvicorn

from md2pdf.config import Config, get_config_summary
from md2pdf.exceptions import ConfigurationError, InputError, ValidationError
from md2pdf.logger import Logger, session_logger
from md2pdf.markdown import ContentRenderer, KrokiDiagramRenderer, MarkdownDocument
from md2pdf.pagination import Paginator
from md2pdf.paths import validate_input_markdown_path
from md2pdf.preview import MeasurerFactory, PreviewService, PreviewSettings
from md2pdf.rendering import ChromiumPdfPrinter, DocumentComposer, PdfPrinter
from md2pdf.sessions import GenerationSession
from md2pdf.templates import TemplateRegistry
from md2pdf.validation.models import (
    DEFAULT_FONT_ID,
    DEFAULT_TEMPLATE_ID,
    FONT_SIZE_DEFAULT,
    TEMPLATE_IDS,
    GenerateRequest,
)
from md2pdf.web_server import Md2PdfWebServer

EXIT_OK = 0
EXIT_ERROR = 1

logger: Logger = session_logger


@dataclass
class Pipeline:
    """Components wired together for one input document."""

    document: MarkdownDocument
    template_registry: TemplateRegistry
    preview_service: PreviewService
    session: GenerationSession


def build_pipeline(
    input_path: str,
    logger: Logger,
    measurer_factory: Optional[MeasurerFactory] = None,
    printer: Optional[PdfPrinter] = None,
) -> Pipeline:
    """
    Validate startup preconditions and wire the components.

    Raises:
        InputError: If the input is not a readable .md file
        ConfigurationError: If template assets are missing
    """
    resolved = validate_input_markdown_path(input_path)
    document = MarkdownDocument.load(resolved)

    registry = TemplateRegistry.from_content_dir(Config.get_content_dir(), logger)
    registry.ensure_complete(TEMPLATE_IDS)

    composer = DocumentComposer(registry)
    preview_service = PreviewService(
        document=document,
        content_renderer=ContentRenderer(logger, KrokiDiagramRenderer(logger)),
        paginator=Paginator(logger),
        composer=composer,
        logger=logger,
        measurer_factory=measurer_factory,
    )
    session = GenerationSession(
        composer=composer,
        printer=printer or ChromiumPdfPrinter(logger),
        logger=logger,
    )
    return Pipeline(document, registry, preview_service, session)


async def run_headless(
    pipeline: Pipeline,
    output_path: str,
    template_id: str = DEFAULT_TEMPLATE_ID,
    font_id: str = DEFAULT_FONT_ID,
    font_size: int = FONT_SIZE_DEFAULT,
    force_overwrite: bool = False,
) -> int:
    """Paginate and print without the browser UI. Returns the exit code."""
    viewport = Config.get_viewport()
    settings = PreviewSettings(
        template_id=template_id,
        font_id=font_id,
        font_size=font_size,
        viewport_width=viewport["width"],
        viewport_height=viewport["height"],
    )
    try:
        run = await pipeline.preview_service.paginate(settings)
    except ValidationError as e:
        logger.error("Invalid settings", error=e.message, **e.details)
        return EXIT_ERROR

    response = await pipeline.session.generate(
        GenerateRequest(
            output_path=output_path,
            template_id=template_id,
            font_id=font_id,
            font_size=font_size,
            pages_html=run.render(),
            force_overwrite=force_overwrite,
        )
    )
    if response.ok:
        logger.info("Done", output=str(pipeline.session.output_path), pages=run.page_count)
        return EXIT_OK

    if response.code == "OVERWRITE_REQUIRED":
        logger.error("Output file exists; pass --force to overwrite", output=output_path)
    else:
        logger.error("Generation failed", code=response.code, reason=response.reason)
    return EXIT_ERROR


async def run_interactive(
    pipeline: Pipeline, host: str, port: int, open_browser: bool = True
) -> int:
    """Serve the preview UI until the session finishes. Returns the exit code."""
    server_app = Md2PdfWebServer(
        pipeline.document, pipeline.preview_service, pipeline.session, logger
    )
    server = uvicorn.Server(
        uvicorn.Config(server_app.app, host=host, port=port, log_level="warning")
    )
    serve_task = asyncio.create_task(server.serve())

    while not server.started:
        if serve_task.done():
            serve_task.result()
            logger.error("Web server exited during startup")
            return EXIT_ERROR
        await asyncio.sleep(0.05)

    bound_port = server.servers[0].sockets[0].getsockname()[1]
    url = f"http://{host}:{bound_port}/"
    logger.info("Preview ready", url=url, input=str(pipeline.document.path))
    if open_browser:
        webbrowser.open(url)

    finished = asyncio.create_task(pipeline.session.finished.wait())
    await asyncio.wait({finished, serve_task}, return_when=asyncio.FIRST_COMPLETED)

    server.should_exit = True
    await serve_task
    finished.cancel()

    if pipeline.session.exit_code is None:
        logger.info("Server stopped before the session finished")
        return EXIT_OK
    return pipeline.session.exit_code


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="md2pdf", description="Convert a Markdown file to a paginated PDF"
    )
    parser.add_argument("input", help="Path to the Markdown (.md) file")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write the PDF directly to this path without opening the preview",
    )
    parser.add_argument(
        "--template",
        type=str,
        default=DEFAULT_TEMPLATE_ID,
        choices=TEMPLATE_IDS,
        help=f"Visual template (default: {DEFAULT_TEMPLATE_ID})",
    )
    parser.add_argument(
        "--font",
        type=str,
        default=DEFAULT_FONT_ID,
        help=f"Font id (default: {DEFAULT_FONT_ID})",
    )
    parser.add_argument(
        "--font-size",
        type=int,
        default=FONT_SIZE_DEFAULT,
        help="Font size in px, 0 for the template's size (default: 0)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the output file if it exists (headless mode)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host address for the preview server (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=0,
        help="Port for the preview server (default: 0, any free port)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open the preview in a browser",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        session_logger.set_level(logging.DEBUG)
    logger.debug("Configuration", **get_config_summary())

    try:
        pipeline = build_pipeline(args.input, logger)
    except InputError as e:
        logger.error("Invalid input", error=e.message)
        return EXIT_ERROR
    except ConfigurationError as e:
        logger.error("FATAL: Rendering assets incomplete", error=e.message, **e.details)
        return EXIT_ERROR

    try:
        if args.output:
            return asyncio.run(
                run_headless(
                    pipeline,
                    args.output,
                    template_id=args.template,
                    font_id=args.font,
                    font_size=args.font_size,
                    force_overwrite=args.force,
                )
            )
        return asyncio.run(
            run_interactive(pipeline, args.host, args.port, open_browser=not args.no_browser)
        )
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return EXIT_OK
    except Exception as e:
        logger.error("Fatal error", error=str(e), error_type=type(e).__name__)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
