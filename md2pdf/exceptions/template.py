"""Template not found exception."""
from typing import List, Optional

from md2pdf.exceptions.base import RegistryError


class TemplateNotFoundError(RegistryError):
    """Raised when a template cannot be found."""

    def __init__(self, template_id: str, available_templates: Optional[List[str]] = None):
        """
        Args:
            template_id: ID of the template that was not found
            available_templates: List of available templates
        """
        available_text = ""
        if available_templates:
            available_text = f" Available templates: {', '.join(available_templates)}."

        super().__init__(
            f"Template '{template_id}' not found.{available_text}",
            code="TEMPLATE_NOT_FOUND",
            details={"template_id": template_id, "available": available_templates or []},
        )
        self.template_id = template_id
