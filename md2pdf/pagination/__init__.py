"""Pagination engine: splits flowed HTML into fixed-size pages."""
from md2pdf.pagination.measurers import (
    BrowserLayoutMeasurer,
    LayoutMeasurer,
    StaticLayoutMeasurer,
)
from md2pdf.pagination.models import (
    ContentNode,
    Page,
    PaginationKey,
    PaginationRun,
    split_flowed_content,
)
from md2pdf.pagination.paginator import Paginator
from md2pdf.pagination.scheduler import RepaginationScheduler

__all__ = [
    "BrowserLayoutMeasurer",
    "LayoutMeasurer",
    "StaticLayoutMeasurer",
    "ContentNode",
    "Page",
    "PaginationKey",
    "PaginationRun",
    "split_flowed_content",
    "Paginator",
    "RepaginationScheduler",
]
