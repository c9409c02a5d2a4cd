"""
Ingestor Module - Discover templates, their background images and overlay assets
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from loguru import logger

from config import settings
from utils.exceptions import TemplateFileMissingError, TemplateNotFoundError
from utils.path_utils import file_info, resolve_safe_path


BACKGROUND_FILES = ("cover.png", "text.png", "ending.png")
ASSETS_DIRNAME = "assets"
ASSET_EXTENSION = ".png"


@dataclass(frozen=True)
class TemplateImages:
    """Backgrounds and the overlay asset pool of one template"""
    name: str
    cover_path: Path
    text_path: Path
    ending_path: Path
    assets: Tuple[str, ...]


class TemplateIngestor:
    """
    Loads template folders: <base_dir>/<name>/{cover,text,ending}.png + assets/*.png
    """

    def __init__(self, base_dir: Path = None):
        """
        Initialize Ingestor

        Args:
            base_dir: Template base directory (default: settings.TEMPLATE_DIR)
        """
        self.base_dir = Path(base_dir or settings.TEMPLATE_DIR)

        logger.info(f"TemplateIngestor initialized with base dir: {self.base_dir}")

    def _png_files(self, directory: Path) -> List[Path]:
        if not directory.is_dir():
            return []
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ASSET_EXTENSION),
            key=lambda p: p.name,
        )

    def list_templates(self) -> List[str]:
        """
        List template names

        Returns:
            Names of directories directly under the base directory
        """
        if not self.base_dir.exists():
            return []
        return sorted(p.name for p in self.base_dir.iterdir() if p.is_dir())

    def discover_assets(self, template_dir: Path) -> Tuple[str, ...]:
        """
        Discover overlay assets of a template

        Returns:
            Asset paths sorted by file name (empty if there is no assets dir)
        """
        assets = tuple(str(p) for p in self._png_files(template_dir / ASSETS_DIRNAME))
        logger.debug(f"Discovered {len(assets)} overlay assets in {template_dir}")
        return assets

    def list_template_files(self, name: str) -> Dict:
        """
        Describe the files of a template

        Args:
            name: Template name

        Returns:
            Dict with template_dir, template_name, png_files and asset_files

        Raises:
            TemplateNotFoundError: no such template directory
            UnsafePathError: name escapes the template base directory
        """
        template_dir = resolve_safe_path(self.base_dir, name)
        if not template_dir.is_dir():
            raise TemplateNotFoundError(template_dir)

        return {
            "template_dir": str(template_dir),
            "template_name": name,
            "png_files": [file_info(p, template_dir) for p in self._png_files(template_dir)],
            "asset_files": [
                file_info(p, template_dir) for p in self._png_files(template_dir / ASSETS_DIRNAME)
            ],
        }

    def load_template(self, name: str = None) -> TemplateImages:
        """
        Resolve a template for rendering

        Args:
            name: Template name (default: settings.DEFAULT_TEMPLATE)

        Returns:
            Background paths and asset pool

        Raises:
            TemplateFileMissingError: a required background image is missing
            UnsafePathError: name escapes the template base directory
        """
        name = name or settings.DEFAULT_TEMPLATE
        template_dir = resolve_safe_path(self.base_dir, name)

        cover_path, text_path, ending_path = (template_dir / f for f in BACKGROUND_FILES)
        for path in (cover_path, text_path, ending_path):
            if not path.is_file():
                raise TemplateFileMissingError(path)

        assets = self.discover_assets(template_dir)
        logger.info(f"Loaded template '{name}' with {len(assets)} overlay assets")

        return TemplateImages(
            name=name,
            cover_path=cover_path,
            text_path=text_path,
            ending_path=ending_path,
            assets=assets,
        )
