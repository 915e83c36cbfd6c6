"""Ordered validation of generation requests.

Checks run in a fixed order and the first failure wins, so a request with
several problems always reports the same one.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from md2pdf.config import Config
from md2pdf.exceptions import ValidationError
from md2pdf.paths import normalize_pdf_path
from md2pdf.validation.models import (
    FONT_IDS,
    FONT_SIZE_DEFAULT,
    TEMPLATE_IDS,
    GenerateRequest,
)


@dataclass
class ValidatedRequest:
    """A generation request that passed validation."""

    output_path: str
    template_id: str
    font_id: str
    font_size: int
    pages_html: str
    force_overwrite: bool


class GenerateRequestValidator:
    """Validates generation requests against recognised ids and bounds."""

    def __init__(
        self,
        template_ids: Sequence[str] = TEMPLATE_IDS,
        font_ids: Sequence[str] = FONT_IDS,
        font_size_bounds: Optional[Tuple[int, int]] = None,
    ):
        self.template_ids = tuple(template_ids)
        self.font_ids = tuple(font_ids)
        self.font_size_min, self.font_size_max = font_size_bounds or Config.get_font_size_bounds()

    def is_valid_font_size(self, font_size: Optional[int]) -> bool:
        if font_size is None:
            return False
        if font_size == FONT_SIZE_DEFAULT:
            return True
        return self.font_size_min <= font_size <= self.font_size_max

    def validate(self, request: GenerateRequest) -> ValidatedRequest:
        """
        Validate a request.

        Args:
            request: Incoming generation request

        Returns:
            ValidatedRequest with the normalised output path

        Raises:
            ValidationError: On the first failing check
        """
        output_path = normalize_pdf_path(request.output_path)
        if not output_path:
            raise ValidationError("Output path is required.", details={"field": "outputPath"})

        if request.template_id not in self.template_ids:
            raise ValidationError(
                "Invalid template selected.",
                details={"field": "templateId", "received": request.template_id},
            )

        if request.font_id not in self.font_ids:
            raise ValidationError(
                "Invalid font selected.",
                details={"field": "fontId", "received": request.font_id},
            )

        if not self.is_valid_font_size(request.font_size):
            raise ValidationError(
                "Invalid font size.",
                details={
                    "field": "fontSize",
                    "received": request.font_size,
                    "min": self.font_size_min,
                    "max": self.font_size_max,
                },
            )

        if not request.pages_html:
            raise ValidationError("Preview pages are empty.", details={"field": "pagesHtml"})

        return ValidatedRequest(
            output_path=output_path,
            template_id=request.template_id,
            font_id=request.font_id,
            font_size=request.font_size,
            pages_html=request.pages_html,
            force_overwrite=request.force_overwrite,
        )
