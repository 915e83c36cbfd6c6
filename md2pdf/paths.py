"""Filesystem path helpers: input validation, output naming and browsing."""

import os
from pathlib import Path
from typing import List, Optional, Union

from md2pdf.exceptions import InputError
from md2pdf.validation.models import BrowseEntry, BrowseResponse

MARKDOWN_EXTENSION = ".md"
PDF_EXTENSION = ".pdf"


def derive_default_output_path(input_path: Union[str, Path]) -> str:
    """Same directory and stem as the input, with a .pdf extension."""
    path = Path(input_path)
    return str(path.with_name(f"{path.stem}{PDF_EXTENSION}"))


def normalize_pdf_path(output_path: str) -> str:
    """
    Trim an output path and make sure it ends in .pdf.

    The extension check is case-insensitive, so ``REPORT.PDF`` is kept as is.
    Blank input yields an empty string, which callers treat as invalid.
    """
    trimmed = (output_path or "").strip()
    if not trimmed:
        return ""
    if trimmed.lower().endswith(PDF_EXTENSION):
        return trimmed
    return f"{trimmed}{PDF_EXTENSION}"


def validate_input_markdown_path(input_path: Union[str, Path]) -> Path:
    """
    Resolve and check the Markdown source path.

    Args:
        input_path: Path given on the command line

    Returns:
        The resolved absolute path

    Raises:
        InputError: If the extension is not .md or the file cannot be read
    """
    resolved = Path(input_path).expanduser().resolve()

    if not resolved.name.lower().endswith(MARKDOWN_EXTENSION):
        raise InputError(
            "Input file must have a .md extension.", details={"path": str(resolved)}
        )

    if not resolved.is_file() or not os.access(resolved, os.R_OK):
        raise InputError(
            f"Input file not found or not readable: {resolved}", details={"path": str(resolved)}
        )

    return resolved


def list_directory(directory: Union[str, Path], default_dir: Optional[str] = None) -> BrowseResponse:
    """
    List subdirectories and PDF files of a directory.

    Hidden entries are skipped, entries that cannot be stat'ed are skipped,
    and an unreadable directory produces an empty listing. Directories sort
    before files, then by name.
    """
    target = str(directory) if directory else (default_dir or os.getcwd())
    resolved = str(Path(target).expanduser().resolve())

    try:
        names = os.listdir(resolved)
    except OSError:
        return BrowseResponse(dir=resolved, entries=[])

    entries: List[BrowseEntry] = []
    for name in names:
        if name.startswith("."):
            continue
        try:
            is_directory = Path(resolved, name).is_dir()
        except OSError:
            continue
        if is_directory or name.lower().endswith(PDF_EXTENSION):
            entries.append(BrowseEntry(name=name, is_directory=is_directory))

    entries.sort(key=lambda entry: (not entry.is_directory, entry.name))
    return BrowseResponse(dir=resolved, entries=entries)
