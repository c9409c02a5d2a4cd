"""
Font registry - map configured font families to font files
"""

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from loguru import logger
from PIL import ImageFont

from config import FontDef, settings


class FontRegistry:
    """
    Resolves a (family, size) pair to a Pillow font

    Registration failures are logged and never raised; an unknown or broken
    family falls back to Pillow's default font.
    """

    def __init__(self, fonts: Mapping[str, FontDef] = None, project_root: Path = None):
        self.fonts = dict(fonts if fonts is not None else settings.FONTS)
        self.project_root = project_root or settings.PROJECT_ROOT
        self._families: Dict[str, Path] = {}
        self._cache: Dict[Tuple[str, int], ImageFont.ImageFont] = {}

    def _resolve(self, font: FontDef) -> Path:
        path = Path(font.path)
        return path if path.is_absolute() else (self.project_root / path).resolve()

    def register_all(self) -> int:
        """
        Register every configured font

        Returns:
            Number of fonts registered successfully
        """
        registered = 0
        for key, font in self.fonts.items():
            abs_path = self._resolve(font)
            try:
                ImageFont.truetype(str(abs_path), 12)
            except OSError as e:
                logger.warning(f"Font register warning for {abs_path}: {e}")
                continue
            self._families[font.family] = abs_path
            registered += 1

        logger.info(f"Registered {registered}/{len(self.fonts)} fonts")
        return registered

    def get_font(self, family: str, size: float) -> ImageFont.ImageFont:
        """
        Load a font for drawing

        Args:
            family: Font family name from the text style
            size: Font size in pixels

        Returns:
            TrueType font, or Pillow's default font at that size
        """
        px = max(1, int(round(size)))
        key = (family, px)
        if key in self._cache:
            return self._cache[key]

        path: Optional[Path] = self._families.get(family)
        if path is None:
            logger.debug(f"Font family '{family}' not registered, using default")
            font = ImageFont.load_default(size=px)
        else:
            font = ImageFont.truetype(str(path), px)

        self._cache[key] = font
        return font

    def check(self) -> List[Dict]:
        """Report which configured font files exist on disk"""
        items = []
        for name, font in self.fonts.items():
            abs_path = self._resolve(font)
            items.append({
                "name": name,
                "family": font.family,
                "path": str(abs_path),
                "exists": abs_path.exists(),
            })
        return items
