"""Pytest configuration and fixtures

Shared fixtures for all tests: the bundled template registry, a document
composer, Markdown input files and browser-free fakes (see fakes.py).
"""

import sys
from pathlib import Path

import pytest

# Add project root and this directory to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from md2pdf.config import Config
from md2pdf.logger import DefaultLogger
from md2pdf.pagination import StaticLayoutMeasurer
from md2pdf.rendering import DocumentComposer
from md2pdf.templates import TemplateRegistry
from fakes import FakePdfPrinter


@pytest.fixture
def logger() -> DefaultLogger:
    return DefaultLogger(name="md2pdf.test")


@pytest.fixture
def template_registry(logger) -> TemplateRegistry:
    """Registry over the bundled content directory."""
    return TemplateRegistry.from_content_dir(Config.get_content_dir(), logger)


@pytest.fixture
def composer(template_registry) -> DocumentComposer:
    return DocumentComposer(template_registry)


@pytest.fixture
def fake_printer() -> FakePdfPrinter:
    return FakePdfPrinter()


@pytest.fixture
def static_measurer() -> StaticLayoutMeasurer:
    return StaticLayoutMeasurer(capacity=1000.0)


@pytest.fixture
def markdown_file(tmp_path: Path):
    """Factory writing a Markdown file into a temporary directory."""

    def _write(source: str = "# Title\n\nBody text.\n", name: str = "notes.md") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
