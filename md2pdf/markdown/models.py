"""Markdown source document."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from md2pdf.exceptions import InputError


@dataclass(frozen=True)
class MarkdownDocument:
    """Markdown source plus the directory relative assets resolve against."""

    path: Path
    source: str

    @property
    def base_dir(self) -> Path:
        return self.path.parent

    @property
    def file_name(self) -> str:
        return self.path.name

    @classmethod
    def load(cls, path: Union[str, Path]) -> "MarkdownDocument":
        """
        Read a Markdown file as UTF-8.

        Raises:
            InputError: If the file cannot be read or is not valid UTF-8
        """
        resolved = Path(path)
        try:
            with open(resolved, "r", encoding="utf-8") as f:
                return cls(path=resolved, source=f.read())
        except UnicodeDecodeError as e:
            raise InputError(
                f"Input file is not valid UTF-8 text: {resolved}",
                details={"path": str(resolved), "position": e.start},
            ) from e
        except OSError as e:
            raise InputError(
                f"Input file could not be read: {resolved} ({e.strerror or e})",
                details={"path": str(resolved)},
            ) from e
