"""Base registry for YAML-described assets rendered with Jinja2."""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from md2pdf.logger import Logger


class BaseRegistry(ABC):
    """Abstract base for registries managing YAML metadata + Jinja2 templates."""

    def __init__(self, registry_dir: str, logger: Logger, content_dir: Optional[str] = None):
        """
        Initialize the registry.

        Args:
            registry_dir: Path to directory containing item definitions
            logger: Logger instance
            content_dir: Directory searched for Jinja2 page templates
                (defaults to the parent of registry_dir)
        """
        self.registry_dir = Path(registry_dir)
        self.content_dir = Path(content_dir) if content_dir else self.registry_dir.parent
        self.logger = logger

        self._jinja_env: Optional[Environment] = None
        self._setup_jinja_env()
        self._load_items()

    def _setup_jinja_env(self) -> None:
        """Setup Jinja2 environment for page template rendering."""
        self._jinja_env = Environment(
            loader=FileSystemLoader(str(self.content_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    @abstractmethod
    def _load_items(self) -> None:
        """Load all items from registry directory. Implemented by subclasses."""
        pass

    def _load_yaml_file(self, file_path: Path) -> Optional[Dict]:
        """Load and parse a YAML file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to parse YAML {file_path}: {e}")
            return None

    def _read_text(self, file_path: Path) -> str:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()

    def get_jinja_template(self, template_path: str) -> Template:
        """
        Get a Jinja2 template for rendering.

        Args:
            template_path: Path relative to content_dir

        Returns:
            Jinja2 Template object
        """
        if self._jinja_env is None:
            raise RuntimeError("Jinja environment not initialized")
        return self._jinja_env.get_template(template_path)
