"""Composition of paginated markup into a self-contained printable document."""

from md2pdf.pagination.models import Page
from md2pdf.templates.registry import DOCUMENT_TEMPLATE, TemplateRegistry
from md2pdf.validation.models import DEFAULT_FONT_ID, FONT_SIZE_DEFAULT


class DocumentComposer:
    """Builds the printable HTML document from pages and style assets.

    Composition is pure: style sheets are inlined (nothing is fetched at
    print time) and identical inputs always produce identical output.
    """

    def __init__(self, template_registry: TemplateRegistry):
        self.template_registry = template_registry
        self._template = template_registry.get_jinja_template(DOCUMENT_TEMPLATE)

    def compose(
        self,
        pages_html: str,
        style_sheet: str,
        math_style_sheet: str,
        template_id: str,
        font_id: str,
        font_size: int,
    ) -> str:
        """
        Compose a printable document.

        Args:
            pages_html: Concatenated page sections
            style_sheet: Base and template rules
            math_style_sheet: Rules for rendered math markup
            template_id: Template selector applied to the page root
            font_id: Font override, or ``default`` for the template font
            font_size: Font size in px, or 0 for the template size

        Returns:
            Complete HTML document
        """
        font_attr = font_id if font_id and font_id != DEFAULT_FONT_ID else ""
        font_size_style = f"--doc-size: {font_size}px" if font_size > FONT_SIZE_DEFAULT else ""
        return self._template.render(
            pages_html=pages_html,
            style_css=style_sheet,
            math_css=math_style_sheet,
            template_id=template_id,
            font_attr=font_attr,
            font_size_style=font_size_style,
        )

    def compose_with_registry(
        self, pages_html: str, template_id: str, font_id: str, font_size: int
    ) -> str:
        """Compose using the registry's style sheets."""
        return self.compose(
            pages_html,
            self.template_registry.get_stylesheet(),
            self.template_registry.get_math_stylesheet(),
            template_id,
            font_id,
            font_size,
        )

    def compose_measuring_shell(self, template_id: str, font_id: str, font_size: int) -> str:
        """A document holding one empty page, used to measure layout."""
        return self.compose_with_registry(
            Page(number=1, capacity=0).render(), template_id, font_id, font_size
        )
