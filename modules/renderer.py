"""
Renderer Module - Draw wrapped, inline-styled text blocks onto a poster canvas
"""

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger
from PIL import ImageColor, ImageDraw

from config import TextStyle, settings
from modules.layout import wrap_lines, wrap_plain
from modules.markup import StyleFrame, StyledSpan, resolve_inline
from utils.font_utils import FontRegistry


@dataclass(frozen=True)
class TextBlock:
    """
    Fully resolved style of one text block for a single draw pass

    width/height are carried for callers but not enforced by layout.
    """
    x: float
    y: float
    font_family: str
    font_size: float
    color: str
    line_height: float
    text_align: str = "left"
    chars_per_line: int = 24
    max_lines: Optional[int] = None
    width: Optional[float] = None
    height: Optional[float] = None
    inline_markup: bool = True

    @classmethod
    def from_style(
        cls,
        style: TextStyle,
        default_font_size: float,
        default_chars_per_line: int,
        max_lines: Optional[int] = None,
    ) -> "TextBlock":
        """
        Apply defaults to a configured text style

        Args:
            style: Configured (possibly partial) style
            default_font_size: Used when the style has no font size
            default_chars_per_line: Used when the style has no budget
            max_lines: Forces a line cap (titles draw a single line)
        """
        font_size = style.font_size or default_font_size
        line_height = style.line_height or round(font_size * settings.LINE_HEIGHT_RATIO)
        return cls(
            x=style.x,
            y=style.y,
            font_family=style.font_family,
            font_size=font_size,
            color=style.color or settings.DEFAULT_TEXT_COLOR,
            line_height=line_height,
            text_align=style.text_align,
            chars_per_line=style.chars_per_line if style.chars_per_line is not None else default_chars_per_line,
            max_lines=max_lines if max_lines is not None else style.max_lines,
            width=style.width,
            height=style.height,
            inline_markup=style.enable_inline_markup,
        )


class TextBlockRenderer:
    """
    Lays out resolved lines top to bottom and draws each span left to right
    """

    def __init__(self, fonts: FontRegistry):
        self.fonts = fonts

    def layout(self, content: str, block: TextBlock) -> List[List[StyledSpan]]:
        """
        Wrap and resolve content into per-line spans

        Args:
            content: Raw text with inline markup
            block: Resolved block style

        Returns:
            One span list per display line, truncated to block.max_lines
        """
        wrap = wrap_lines if block.inline_markup else wrap_plain
        lines = wrap(content, block.chars_per_line)
        if block.max_lines is not None:
            lines = lines[:max(0, block.max_lines)]

        if not block.inline_markup:
            # Tags are drawn literally in the block style
            return [[StyledSpan(line, block.color, block.font_size)] if line else [] for line in lines]

        base = StyleFrame(color=block.color, font_size=block.font_size)
        return [resolve_inline(line, base) for line in lines]

    def draw_block(self, draw: ImageDraw.ImageDraw, content: str, block: TextBlock) -> int:
        """
        Draw a text block

        Args:
            draw: Drawing context of the target canvas
            content: Raw text with inline markup
            block: Resolved block style

        Returns:
            Number of lines drawn
        """
        if block.text_align != "left":
            # Only left alignment is implemented
            logger.debug(f"textAlign '{block.text_align}' drawn as left")

        lines = self.layout(content, block)

        for index, spans in enumerate(lines):
            cursor_x = block.x
            y = block.y + index * block.line_height

            for span in spans:
                font = self.fonts.get_font(block.font_family, span.font_size)
                draw.text(
                    (cursor_x, y),
                    span.text,
                    font=font,
                    fill=self._fill(span.color, block.color),
                    anchor="la",
                )
                cursor_x += draw.textlength(span.text, font=font)

        return len(lines)

    @staticmethod
    def _fill(color: str, fallback: str) -> str:
        for candidate in (color, fallback):
            try:
                ImageColor.getrgb(candidate)
                return candidate
            except ValueError:
                logger.warning(f"Invalid text color '{candidate}'")
        return settings.DEFAULT_TEXT_COLOR
