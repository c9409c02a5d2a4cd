"""
Exporter Module - Write rendered poster pages and manage the output directory
"""

import shutil
from pathlib import Path
from typing import Dict, List

from loguru import logger
from PIL import Image

from config import OutputConfig, settings
from utils.image_utils import save_image
from utils.path_utils import file_info, resolve_safe_path


class Exporter:
    """
    Exports rendered pages as <output_dir>/<title_dir>/<stem>.<format>
    """

    def __init__(self, output_dir: Path = None, output: OutputConfig = None):
        """
        Initialize Exporter

        Args:
            output_dir: Output directory (default: settings.OUTPUT_DIR)
            output: Format and quality (default: from settings)
        """
        self.output_dir = Path(output_dir or settings.OUTPUT_DIR)
        self.output = output or OutputConfig(
            directory=str(self.output_dir),
            format=settings.OUTPUT_FORMAT,
            quality=settings.OUTPUT_QUALITY,
        )

        logger.info(f"Exporter initialized with output dir: {self.output_dir}")

    @property
    def extension(self) -> str:
        return self.output.format

    @property
    def quality(self) -> int:
        """Encoder quality on a 1-100 scale (0-1 fractions are scaled up)"""
        q = self.output.quality
        if q <= 1:
            q = q * 100
        return int(min(100, max(1, round(q))))

    def output_dir_for(self, title_dir: str) -> Path:
        """
        Directory holding one poster set

        Args:
            title_dir: Directory name supplied by the caller

        Returns:
            Path confined to the output directory
        """
        return resolve_safe_path(self.output_dir, title_dir)

    def save(self, canvas: Image.Image, directory: Path, stem: str) -> Path:
        """
        Save a rendered page

        Args:
            canvas: Rendered page
            directory: Target directory (from output_dir_for)
            stem: File name without extension, e.g. 'cover' or 'text_1'

        Returns:
            Path to saved file
        """
        output_path = Path(directory) / f"{stem}.{self.extension}"
        save_image(canvas, output_path, quality=self.quality)
        logger.info(f"Saved {output_path}")
        return output_path

    def list_outputs(self) -> List[Dict]:
        """
        List all files under the output directory, recursively

        Returns:
            File descriptions sorted by relative path
        """
        if not self.output_dir.exists():
            return []

        files = [file_info(p, self.output_dir) for p in sorted(self.output_dir.rglob("*")) if p.is_file()]
        logger.debug(f"Found {len(files)} files in {self.output_dir}")
        return files

    def clear(self, title_dir: str) -> bool:
        """
        Delete one poster set

        Args:
            title_dir: Directory name under the output directory

        Returns:
            True if something was deleted, False if it did not exist
        """
        target = self.output_dir_for(title_dir)
        if target == self.output_dir.resolve() or not target.exists():
            return False

        if target.is_dir():
            shutil.rmtree(target)
        else:
            target.unlink()

        logger.info(f"Cleared {target}")
        return True
