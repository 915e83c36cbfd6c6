"""Visual template registry."""
from md2pdf.templates.registry import TemplateRegistry
from md2pdf.templates.models import FontFace, TemplateListItem, TemplateMetadata

__all__ = ["TemplateRegistry", "FontFace", "TemplateListItem", "TemplateMetadata"]
