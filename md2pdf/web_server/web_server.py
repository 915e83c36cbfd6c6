"""md2pdf Web Server - local session API behind the interactive preview.

Exposes:
- The preview page and its startup state
- Pagination of the input document for given settings
- Output directory browsing
- PDF generation and session cancellation

Bound to the loopback interface; one server serves exactly one session.
"""

from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse

from md2pdf.config import Config
from md2pdf.exceptions import InvalidSessionStateError, ValidationError
from md2pdf.logger import Logger, session_logger
from md2pdf.markdown import MarkdownDocument
from md2pdf.paths import derive_default_output_path, list_directory
from md2pdf.preview import PreviewService, PreviewSettings
from md2pdf.sessions import GenerationSession
from md2pdf.templates.registry import PREVIEW_TEMPLATE
from md2pdf.validation.models import (
    DEFAULT_FONT_ID,
    DEFAULT_TEMPLATE_ID,
    FONT_OPTIONS,
    FONT_SIZE_DEFAULT,
    GenerateRequest,
    InitialState,
    PreviewRequest,
    PreviewResponse,
)


class Md2PdfWebServer:
    """FastAPI server for one preview-and-generate session."""

    def __init__(
        self,
        document: MarkdownDocument,
        preview_service: PreviewService,
        session: GenerationSession,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the md2pdf web server.

        Args:
            document: The Markdown document being converted
            preview_service: Paginates the document for preview requests
            session: Generation session handling generate and cancel
            logger: Logger instance (default: session_logger)

        Endpoints exposed:
            GET /ping - Health check
            GET / - Interactive preview page
            GET /api/init - Startup state (input paths, default output, options)
            GET /api/markdown - Raw Markdown source
            GET /api/browse - List subdirectories and PDF files
            POST /api/preview - Paginate for the given settings
            POST /api/generate - Write the PDF
            POST /api/cancel - Cancel the session
        """
        self.app = FastAPI(title="md2pdf", description="Markdown to PDF preview session")
        self.document = document
        self.preview_service = preview_service
        self.session = session
        self.template_registry = preview_service.composer.template_registry
        self.logger: Logger = logger or session_logger

        self.logger.info(
            "md2pdf web server initialized",
            input_path=str(document.path),
            templates=self.template_registry.template_ids(),
        )
        self._setup_routes()

    def initial_state(self) -> InitialState:
        font_size_min, font_size_max = Config.get_font_size_bounds()
        return InitialState(
            input_path=str(self.document.path),
            input_file_name=self.document.file_name,
            input_dir=str(self.document.base_dir),
            default_output_path=derive_default_output_path(self.document.path),
            templates=[t.model_dump() for t in self.template_registry.list_templates()],
            fonts=[f.to_wire() for f in FONT_OPTIONS],
            font_size_min=font_size_min,
            font_size_max=font_size_max,
        )

    def render_preview_page(self) -> str:
        template = self.template_registry.get_jinja_template(PREVIEW_TEMPLATE)
        return template.render(
            state=self.initial_state().to_wire(),
            style_css=self.template_registry.get_stylesheet(),
            math_css=self.template_registry.get_math_stylesheet(),
            default_template_id=DEFAULT_TEMPLATE_ID,
            default_font_id=DEFAULT_FONT_ID,
            font_size_default=FONT_SIZE_DEFAULT,
        )

    def _setup_routes(self):
        """Set up the session routes."""

        # ====================================================================
        # PAGE AND STARTUP STATE
        # ====================================================================

        @self.app.get("/ping")
        async def ping():
            """
            Health check endpoint.

            Returns:
                {status: "ok", timestamp: ISO8601, service: "md2pdf", session: state}
            """
            current_time = datetime.now().isoformat()
            return JSONResponse(
                content={
                    "status": "ok",
                    "timestamp": current_time,
                    "service": "md2pdf",
                    "session": self.session.state.value,
                }
            )

        @self.app.get("/", response_class=HTMLResponse)
        async def preview_page():
            """Serve the interactive preview page."""
            self.logger.info("GET /")
            return HTMLResponse(content=self.render_preview_page())

        @self.app.get("/api/init")
        async def init():
            """Input paths, default output path, templates and fonts."""
            return JSONResponse(content=self.initial_state().to_wire())

        @self.app.get("/api/markdown")
        async def markdown():
            """Raw Markdown source as a JSON string."""
            return JSONResponse(content=self.document.source)

        @self.app.get("/api/browse")
        async def browse(dir: Optional[str] = None):
            """List subdirectories and PDF files of ``dir`` (default: input directory)."""
            listing = list_directory(dir or "", default_dir=str(self.document.base_dir))
            self.logger.debug("/api/browse completed", dir=listing.dir, count=len(listing.entries))
            return JSONResponse(content=listing.to_wire())

        # ====================================================================
        # PREVIEW
        # ====================================================================

        @self.app.post("/api/preview")
        async def preview(request: PreviewRequest):
            """Paginate the document for the given settings."""
            settings = PreviewSettings.from_request(request)
            self.logger.info(
                "POST /api/preview",
                template_id=settings.template_id,
                font_id=settings.font_id,
                font_size=settings.font_size,
                debounce=request.debounce,
            )
            try:
                run = await self.preview_service.refresh(settings, debounce=request.debounce)
            except ValidationError as e:
                self.logger.warning("/api/preview rejected", error=e.message, status=400)
                raise HTTPException(status_code=400, detail=e.to_dict())
            except Exception as e:
                self.logger.error(
                    "/api/preview failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    status=500,
                )
                raise HTTPException(status_code=500, detail=str(e))

            response = PreviewResponse(
                pages_html=run.render(),
                page_count=run.page_count,
                oversized_count=run.oversized_count,
                sequence=run.sequence,
            )
            return JSONResponse(content=response.to_wire())

        # ====================================================================
        # GENERATION
        # ====================================================================

        @self.app.post("/api/generate")
        async def generate(request: GenerateRequest):
            """Validate the request and write the PDF."""
            return await self._generate(request)

        @self.app.exception_handler(RequestValidationError)
        async def request_validation_failed(request: Request, exc: RequestValidationError):
            """Malformed bodies. Generation still answers with a VALIDATION_ERROR result."""
            self.logger.warning(
                "Malformed request body", path=request.url.path, errors=len(exc.errors())
            )
            if request.url.path == "/api/generate":
                return await self._generate(GenerateRequest())
            error = ValidationError(
                "Request body must be a JSON object.", details={"path": request.url.path}
            )
            return JSONResponse(status_code=400, content={"detail": error.to_dict()})

        @self.app.post("/api/cancel")
        async def cancel():
            """Cancel the session. Safe to call more than once."""
            state = self.session.cancel()
            self.logger.info("POST /api/cancel", state=state.value)
            return JSONResponse(content={"ok": True})

    async def _generate(self, request: GenerateRequest) -> JSONResponse:
        self.logger.info(
            "POST /api/generate",
            output_path=request.output_path,
            template_id=request.template_id,
            force_overwrite=request.force_overwrite,
        )
        try:
            result = await self.session.generate(request)
        except InvalidSessionStateError as e:
            self.logger.warning("/api/generate refused", error=e.message, status=409)
            return JSONResponse(status_code=409, content={"detail": e.to_dict()})

        self.logger.info("/api/generate completed", ok=result.ok, code=result.code)
        return JSONResponse(content=result.to_wire())
