"""Template metadata models loaded from template.yaml and fonts/fonts.yaml."""

from typing import List, Optional

from pydantic import BaseModel, Field


class TemplateMetadata(BaseModel):
    """Metadata for a visual template."""

    template_id: str
    name: str
    description: str = ""
    page_format: str = "A4"
    order: int = 100
    version: str = "1.0.0"


class TemplateListItem(BaseModel):
    """A summary item for listing available templates."""

    template_id: str
    name: str
    description: str
    page_format: str


class FontFace(BaseModel):
    """One ``@font-face`` declaration for a selectable web font.

    ``local`` names an installed copy; ``file`` is resolved next to the
    manifest and embedded as a data URI when present.
    """

    family: str
    font_id: str
    weight: str = "400"
    style: str = "normal"
    local: List[str] = Field(default_factory=list)
    file: Optional[str] = None
