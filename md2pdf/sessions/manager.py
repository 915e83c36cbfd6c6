"""Generation session: the single write workflow of one md2pdf run."""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from md2pdf.exceptions import (
    ConflictError,
    InvalidSessionStateError,
    ValidationError,
    WriteError,
)
from md2pdf.logger import Logger
from md2pdf.rendering import DocumentComposer, PdfPrinter
from md2pdf.validation.models import GenerateRequest, GenerateResponse
from md2pdf.validation.validator import GenerateRequestValidator, ValidatedRequest

# Delay before teardown so the final response reaches the client.
COMPLETION_TEARDOWN_DELAY = 0.12
CANCEL_TEARDOWN_DELAY = 0.03

EXIT_OK = 0
EXIT_WRITE_FAILED = 1


class SessionState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    REJECTED = "REJECTED"
    AWAITING_OVERWRITE_CONFIRMATION = "AWAITING_OVERWRITE_CONFIRMATION"
    WRITING = "WRITING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"


TERMINAL_STATES = frozenset({SessionState.COMPLETED, SessionState.CANCELED})


class GenerationSession:
    """Validates, guards and performs PDF generation for one input document.

    A session accepts generation requests until it completes or is
    cancelled. Rejected and overwrite-pending requests leave it open for a
    corrected request. A failed write may be retried once; a second
    failure ends the session.

    Once the session is finished, ``finished`` is set and ``exit_code``
    holds the process exit code.
    """

    def __init__(
        self,
        composer: DocumentComposer,
        printer: PdfPrinter,
        logger: Logger,
        validator: Optional[GenerateRequestValidator] = None,
        max_write_attempts: int = 2,
        file_exists: Callable[[Path], bool] = Path.exists,
    ) -> None:
        """
        Initialize the generation session.

        Args:
            composer: Builds the printable document
            printer: Prints the document to PDF
            logger: Logger instance
            validator: Request validator (default: registry templates and known fonts)
            max_write_attempts: Write attempts before a failure becomes final
            file_exists: Existence check used by the overwrite guard
        """
        self.composer = composer
        self.template_registry = composer.template_registry
        self.printer = printer
        self.logger = logger
        self.validator = validator or GenerateRequestValidator(
            template_ids=self.template_registry.template_ids()
        )
        self.max_write_attempts = max_write_attempts
        self.file_exists = file_exists

        self.state = SessionState.IDLE
        self.history: List[SessionState] = [SessionState.IDLE]
        self.exit_code: Optional[int] = None
        self.finished = asyncio.Event()
        self.output_path: Optional[Path] = None
        self._write_failures = 0
        self._cancel_requested = False
        self._teardown: Optional[asyncio.TimerHandle] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES or self._teardown is not None

    def _transition(self, state: SessionState) -> None:
        self.logger.debug("Session transition", from_state=self.state.value, to_state=state.value)
        self.state = state
        self.history.append(state)

    def _schedule_teardown(self, exit_code: int, delay: float) -> None:
        if self._teardown is not None:
            return
        self.exit_code = exit_code
        loop = asyncio.get_running_loop()
        self._teardown = loop.call_later(delay, self.finished.set)
        self.logger.info("Session finishing", state=self.state.value, exit_code=exit_code)

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        """
        Handle one generation request.

        Args:
            request: Output path, settings and the preview's paginated markup

        Returns:
            GenerateResponse; ``ok`` is true only when the PDF was written

        Raises:
            InvalidSessionStateError: If the session has finished or is writing
        """
        if self.is_terminal or self.state == SessionState.WRITING:
            raise InvalidSessionStateError(self.state.value, "generate")

        self._transition(SessionState.VALIDATING)
        try:
            validated = self.validator.validate(request)
        except ValidationError as e:
            self._transition(SessionState.REJECTED)
            self.logger.warning("Generation request rejected", reason=e.message)
            return GenerateResponse.failure(e.code, e.message)

        target = Path(validated.output_path).expanduser()
        if self.file_exists(target) and not validated.force_overwrite:
            conflict = ConflictError(str(target))
            self._transition(SessionState.AWAITING_OVERWRITE_CONFIRMATION)
            self.logger.info("Output exists, confirmation required", output_path=str(target))
            return GenerateResponse.failure(conflict.code, conflict.message)

        self._transition(SessionState.WRITING)
        try:
            await self._write(validated, target)
        except WriteError as e:
            return self._on_write_failure(target, e)
        except Exception as e:
            self.logger.error(
                "Unexpected error while writing PDF", error=str(e), error_type=type(e).__name__
            )
            failure = WriteError(f"Unexpected error while writing PDF: {e}")
            return self._on_write_failure(target, failure)

        self.output_path = target
        self._transition(SessionState.COMPLETED)
        self.logger.info("PDF generated", output_path=str(target))
        self._schedule_teardown(EXIT_OK, COMPLETION_TEARDOWN_DELAY)
        return GenerateResponse.success()

    async def _write(self, validated: ValidatedRequest, target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(f"Unable to create output directory: {e}") from e

        html = self.composer.compose_with_registry(
            validated.pages_html, validated.template_id, validated.font_id, validated.font_size
        )
        page_format = self.template_registry.get_page_format(validated.template_id)
        await self.printer.print_pdf(html, target, page_format)

    def _on_write_failure(self, target: Path, error: WriteError) -> GenerateResponse:
        self._write_failures += 1
        self._transition(SessionState.FAILED)
        self.logger.error(
            "PDF generation failed",
            output_path=str(target),
            attempt=self._write_failures,
            error=error.message,
        )
        if self._cancel_requested:
            self._transition(SessionState.CANCELED)
            self._schedule_teardown(EXIT_OK, CANCEL_TEARDOWN_DELAY)
        elif self._write_failures >= self.max_write_attempts:
            self._schedule_teardown(EXIT_WRITE_FAILED, COMPLETION_TEARDOWN_DELAY)
        return GenerateResponse.failure(error.code, error.message)

    def cancel(self) -> SessionState:
        """
        Cancel the session.

        Idempotent once the session has finished. A write already in
        progress is not interrupted; it only blocks any further write.

        Returns:
            The session state after the call
        """
        if self.is_terminal:
            return self.state
        if self.state == SessionState.WRITING:
            self._cancel_requested = True
            self.logger.info("Cancel requested during write")
            return self.state

        self._transition(SessionState.CANCELED)
        self._schedule_teardown(EXIT_OK, CANCEL_TEARDOWN_DELAY)
        return self.state
