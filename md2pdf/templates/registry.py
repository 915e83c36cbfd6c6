"""Template registry for visual document templates (CSS + page format)."""

import base64
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from md2pdf.exceptions import ConfigurationError, TemplateNotFoundError
from md2pdf.logger import Logger
from md2pdf.registry_base import BaseRegistry
from md2pdf.templates.models import FontFace, TemplateListItem, TemplateMetadata

BASE_STYLESHEET = "base.css"
MATH_STYLESHEET = "math.css"
DOCUMENT_TEMPLATE = "document.html.jinja2"
PREVIEW_TEMPLATE = "preview.html.jinja2"
FONTS_MANIFEST = "fonts/fonts.yaml"

# Font file suffix to (MIME type, CSS format hint).
FONT_FORMATS = {
    ".woff2": ("font/woff2", "woff2"),
    ".woff": ("font/woff", "woff"),
    ".ttf": ("font/ttf", "truetype"),
    ".otf": ("font/otf", "opentype"),
}


class TemplateRegistry(BaseRegistry):
    """Manages loading and discovery of visual templates.

    Each template lives in ``<templates_dir>/<id>/`` with a ``template.yaml``
    and a ``template.css``. The style sheet handed to the composer is the
    shared ``base.css`` followed by every template's rules, so switching
    templates only needs a different selector class on the page root.
    """

    def __init__(self, templates_dir: str, logger: Logger, content_dir: Optional[str] = None):
        """
        Initialize the template registry.

        Args:
            templates_dir: Path to directory containing template definitions
            logger: Logger instance
            content_dir: Directory holding base.css, math.css and page templates
        """
        self._templates: Dict[str, TemplateMetadata] = {}
        self._css_content: Dict[str, str] = {}
        self._font_css: Optional[str] = None
        super().__init__(templates_dir, logger, content_dir)

    def _load_items(self) -> None:
        """Load all templates from the templates directory."""
        if not self.registry_dir.exists():
            self.logger.warning(f"Templates directory does not exist: {self.registry_dir}")
            return

        for template_dir in sorted(self.registry_dir.iterdir()):
            if not template_dir.is_dir():
                continue

            metadata_file = template_dir / "template.yaml"
            css_file = template_dir / "template.css"

            if not metadata_file.exists() or not css_file.exists():
                self.logger.warning(
                    f"Skipping {template_dir.name}: missing template.yaml or template.css"
                )
                continue

            metadata_data = self._load_yaml_file(metadata_file)
            if not metadata_data:
                continue

            try:
                metadata = TemplateMetadata(**metadata_data)
                css_content = self._read_text(css_file)
            except (PydanticValidationError, OSError) as e:
                self.logger.error(f"Failed to load template from {template_dir.name}: {e}")
                continue

            self._templates[metadata.template_id] = metadata
            self._css_content[metadata.template_id] = css_content
            self.logger.debug(f"Loaded template: {metadata.template_id} ({metadata.name})")

        # Display order comes from the metadata, not the directory listing.
        self._templates = dict(
            sorted(self._templates.items(), key=lambda item: (item[1].order, item[0]))
        )

    def list_templates(self) -> List[TemplateListItem]:
        """Get a list of available templates in display order."""
        return [
            TemplateListItem(
                template_id=metadata.template_id,
                name=metadata.name,
                description=metadata.description,
                page_format=metadata.page_format,
            )
            for metadata in self._templates.values()
        ]

    def template_ids(self) -> List[str]:
        return list(self._templates.keys())

    def template_exists(self, template_id: str) -> bool:
        """Check if a template exists."""
        return template_id in self._templates

    def get_template_metadata(self, template_id: str) -> TemplateMetadata:
        """
        Get metadata for a template.

        Raises:
            TemplateNotFoundError: If the template is not loaded
        """
        metadata = self._templates.get(template_id)
        if metadata is None:
            raise TemplateNotFoundError(template_id, self.template_ids())
        return metadata

    def get_page_format(self, template_id: str) -> str:
        """Physical page format (e.g. ``A4``) used when printing."""
        return self.get_template_metadata(template_id).page_format

    def get_template_css(self, template_id: str) -> Optional[str]:
        return self._css_content.get(template_id)

    def get_stylesheet(self) -> str:
        """Font faces, shared base rules, then the rules of every template."""
        parts = [self.get_font_stylesheet(), self._read_optional(BASE_STYLESHEET)]
        parts.extend(self.get_template_css(template_id) or "" for template_id in self._templates)
        return "\n".join(part for part in parts if part)

    def get_font_faces(self) -> List[FontFace]:
        manifest = self.content_dir / FONTS_MANIFEST
        if not manifest.exists():
            return []
        data = self._load_yaml_file(manifest) or {}
        faces = []
        for entry in data.get("faces") or []:
            try:
                faces.append(FontFace(**entry))
            except (PydanticValidationError, TypeError) as e:
                self.logger.error(f"Invalid font face in {manifest.name}: {e}")
        return faces

    def get_font_stylesheet(self) -> str:
        """
        ``@font-face`` rules for the selectable web fonts.

        Font files are embedded as data URIs so printing never fetches
        anything. The result is built once per registry.
        """
        if self._font_css is None:
            fonts_dir = (self.content_dir / FONTS_MANIFEST).parent
            self._font_css = "\n".join(
                self._font_face_rule(face, fonts_dir) for face in self.get_font_faces()
            )
        return self._font_css

    def _font_face_rule(self, face: FontFace, fonts_dir: Path) -> str:
        sources = [f'local("{name}")' for name in face.local]
        if face.file:
            font_file = fonts_dir / face.file
            mime_format = FONT_FORMATS.get(font_file.suffix.lower())
            if font_file.is_file() and mime_format:
                encoded = base64.b64encode(font_file.read_bytes()).decode("ascii")
                mime, hint = mime_format
                sources.append(f'url("data:{mime};base64,{encoded}") format("{hint}")')
            else:
                self.logger.debug(
                    "Font file not bundled, using installed copy",
                    font_id=face.font_id,
                    file=face.file,
                )
        if not sources:
            sources.append(f'local("{face.family}")')
        return (
            "@font-face {\n"
            f'  font-family: "{face.family}";\n'
            f"  font-style: {face.style};\n"
            f"  font-weight: {face.weight};\n"
            "  font-display: block;\n"
            f"  src: {', '.join(sources)};\n"
            "}"
        )

    def get_math_stylesheet(self) -> str:
        return self._read_optional(MATH_STYLESHEET)

    def _read_optional(self, name: str) -> str:
        path = self.content_dir / name
        if not path.exists():
            return ""
        return self._read_text(path)

    def ensure_complete(self, required_ids: Sequence[str]) -> None:
        """
        Check that the rendering assets needed at startup are present.

        Raises:
            ConfigurationError: If a template, base.css or a page template is missing
        """
        missing = [
            template_id
            for template_id in required_ids
            if not self.template_exists(template_id) or not self.get_template_css(template_id)
        ]
        if missing:
            raise ConfigurationError(
                f"Template assets missing for: {', '.join(missing)}",
                details={"templates_dir": str(self.registry_dir), "missing": missing},
            )

        for name in (BASE_STYLESHEET, DOCUMENT_TEMPLATE, PREVIEW_TEMPLATE):
            if not (self.content_dir / name).exists():
                raise ConfigurationError(
                    f"Rendering asset missing: {name}",
                    details={"content_dir": str(self.content_dir)},
                )

    @classmethod
    def from_content_dir(cls, content_dir: Path, logger: Logger) -> "TemplateRegistry":
        return cls(str(content_dir / "templates"), logger, content_dir=str(content_dir))
