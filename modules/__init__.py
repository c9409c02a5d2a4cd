"""
Poster Card Generator Modules
"""

from .markup import StyleFrame, StyledSpan, resolve_inline, tokenize
from .layout import wrap_lines
from .renderer import TextBlock, TextBlockRenderer
from .overlay import OverlayCompositor
from .ingestor import TemplateIngestor
from .exporter import Exporter
from .composer import PosterComposer, RenderRequest, RenderResult, apply_overrides
from utils.font_utils import FontRegistry

__all__ = [
    "StyleFrame",
    "StyledSpan",
    "resolve_inline",
    "tokenize",
    "wrap_lines",
    "TextBlock",
    "TextBlockRenderer",
    "OverlayCompositor",
    "TemplateIngestor",
    "Exporter",
    "PosterComposer",
    "RenderRequest",
    "RenderResult",
    "apply_overrides",
    "FontRegistry",
]
