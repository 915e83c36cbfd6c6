"""Request and response models for the md2pdf session API (Pydantic v2).

Field names are snake_case in Python and camelCase on the wire. Request
models accept loosely-typed input on purpose: values are coerced before
validation (``null`` to an empty string, numbers to text, numeric text to
integers) and membership checks (template, font, size range) are done by
the generation validator, so the first failing check decides the error
reason. A font size that cannot be read as an integer becomes None and is
rejected there.
"""

import math
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TEMPLATE_IDS = ("clean", "classic", "modern", "academic")
FONT_IDS = ("default", "jakarta", "times", "figtree")

DEFAULT_TEMPLATE_ID = "clean"
DEFAULT_FONT_ID = "default"
# Sentinel meaning "use the template's own font size".
FONT_SIZE_DEFAULT = 0

ErrorCode = Literal["VALIDATION_ERROR", "OVERWRITE_REQUIRED", "WRITE_FAILED"]


class ApiModel(BaseModel):
    """Base model serialising to camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FontOption(ApiModel):
    """Selectable font and its display label."""

    font_id: str = Field(alias="id")
    label: str
    family: Optional[str] = None


FONT_OPTIONS: List[FontOption] = [
    FontOption(font_id="default", label="Template Default"),
    FontOption(
        font_id="jakarta",
        label="Jakarta Sans",
        family='"Plus Jakarta Sans", "Helvetica Neue", Arial, sans-serif',
    ),
    FontOption(font_id="times", label="Times New Roman", family='"Times New Roman", Times, serif'),
    FontOption(
        font_id="figtree", label="Figtree", family='"Figtree", "Helvetica Neue", Arial, sans-serif'
    ),
]


def coerce_text(value: Any) -> str:
    """Loose text coercion for request fields; ``null`` reads as empty."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value if isinstance(value, str) else str(value)


def coerce_int(value: Any) -> Optional[int]:
    """Integer coercion for request fields; None when the value is not integral."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


class GenerateRequest(ApiModel):
    """Request to print the paginated preview to a PDF file."""

    output_path: str = Field(default="", alias="outputPath")
    template_id: str = Field(default="", alias="templateId")
    font_id: str = Field(default=DEFAULT_FONT_ID, alias="fontId")
    font_size: Optional[int] = Field(default=FONT_SIZE_DEFAULT, alias="fontSize")
    pages_html: str = Field(default="", alias="pagesHtml")
    force_overwrite: bool = Field(default=False, alias="forceOverwrite")

    @field_validator("output_path", "template_id", "font_id", "pages_html", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return coerce_text(value)

    @field_validator("font_size", mode="before")
    @classmethod
    def _font_size(cls, value: Any) -> Optional[int]:
        return coerce_int(value)

    @field_validator("force_overwrite", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return coerce_flag(value)


class GenerateResponse(ApiModel):
    """Outcome of a generation request; ``code`` and ``reason`` only on failure."""

    ok: bool
    code: Optional[ErrorCode] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls) -> "GenerateResponse":
        return cls(ok=True)

    @classmethod
    def failure(cls, code: str, reason: str) -> "GenerateResponse":
        return cls(ok=False, code=code, reason=reason)  # type: ignore[arg-type]


class PreviewRequest(ApiModel):
    """Settings that drive a pagination run."""

    template_id: str = Field(default=DEFAULT_TEMPLATE_ID, alias="templateId")
    font_id: str = Field(default=DEFAULT_FONT_ID, alias="fontId")
    font_size: Optional[int] = Field(default=FONT_SIZE_DEFAULT, alias="fontSize")
    viewport_width: Optional[int] = Field(default=None, alias="viewportWidth")
    viewport_height: Optional[int] = Field(default=None, alias="viewportHeight")
    # Viewport resizes arrive in bursts and are debounced server-side.
    debounce: bool = False

    @field_validator("template_id", "font_id", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return coerce_text(value)

    @field_validator("font_size", "viewport_width", "viewport_height", mode="before")
    @classmethod
    def _integer(cls, value: Any) -> Optional[int]:
        return coerce_int(value)

    @field_validator("debounce", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return coerce_flag(value)


class PreviewResponse(ApiModel):
    """Paginated preview markup."""

    pages_html: str = Field(alias="pagesHtml")
    page_count: int = Field(alias="pageCount")
    oversized_count: int = Field(default=0, alias="oversizedCount")
    sequence: int = 0


class InitialState(ApiModel):
    """Startup information for the preview client."""

    input_path: str = Field(alias="inputPath")
    input_file_name: str = Field(alias="inputFileName")
    input_dir: str = Field(alias="inputDir")
    default_output_path: str = Field(alias="defaultOutputPath")
    templates: List[dict] = Field(default_factory=list)
    fonts: List[dict] = Field(default_factory=list)
    font_size_min: int = Field(alias="fontSizeMin")
    font_size_max: int = Field(alias="fontSizeMax")


class BrowseEntry(ApiModel):
    """A directory listing entry."""

    name: str
    is_directory: bool = Field(alias="isDirectory")


class BrowseResponse(ApiModel):
    """Directory listing restricted to subdirectories and PDF files."""

    dir: str
    entries: List[BrowseEntry] = Field(default_factory=list)
