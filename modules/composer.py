"""
Composer Module - Merge per-request overrides and render cover, pages and ending
"""

import copy
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from loguru import logger
from PIL import ImageDraw
from pydantic import BaseModel, Field

from config import (
    ConfigSection,
    OutputFormat,
    OverlayLayer,
    OverlayPosition,
    PosterConfig,
    TextAlign,
    settings,
)
from modules.exporter import Exporter
from modules.ingestor import TemplateIngestor
from modules.overlay import OverlayCompositor, RandomSource
from modules.renderer import TextBlock, TextBlockRenderer
from utils.image_utils import load_background
from utils.font_utils import FontRegistry


# ============================================================================
# Request / result models
# ============================================================================
class TextStylePatch(ConfigSection):
    x: Optional[float] = None
    y: Optional[float] = None
    font_size: Optional[float] = None
    color: Optional[str] = None
    font_family: Optional[str] = None
    text_align: Optional[TextAlign] = None
    line_height: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    max_lines: Optional[int] = None
    text: Optional[str] = None
    enable_inline_markup: Optional[bool] = None
    chars_per_line: Optional[int] = None


class OverlayLayerPatch(ConfigSection):
    enable: Optional[bool] = None
    count: Optional[float] = Field(None, ge=0, le=100, allow_inf_nan=False)
    positions: Optional[List[OverlayPosition]] = None
    randomize: Optional[bool] = None
    scale_range: Optional[Tuple[float, float]] = None
    rotation_range: Optional[Tuple[float, float]] = None
    alpha_range: Optional[Tuple[float, float]] = None


class OutputPatch(ConfigSection):
    directory: Optional[str] = None
    format: Optional[OutputFormat] = None
    quality: Optional[float] = None


class ImagePatch(ConfigSection):
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)


class TemplatesPatch(ConfigSection):
    base_dir: Optional[str] = None
    default_name: Optional[str] = None


class ConfigOverrides(ConfigSection):
    """Partial replacement of the base config; list entries apply by index"""
    output: Optional[OutputPatch] = None
    image: Optional[ImagePatch] = None
    templates: Optional[TemplatesPatch] = None
    title: Optional[List[TextStylePatch]] = None
    pages: Optional[List[TextStylePatch]] = None
    overlay: Optional[List[OverlayLayerPatch]] = None


class RenderRequest(ConfigSection):
    """One render call"""
    title_dir: str = Field(..., min_length=1, description="Output sub-directory for this poster set")
    template_name: Optional[str] = Field(None, description="Template name (uses the default template if not specified)")
    overrides: Optional[ConfigOverrides] = None
    title_texts: Optional[List[str]] = Field(None, description="Text per title line, applied by index")
    pages: Optional[List[str]] = Field(None, description="Text per content page, applied by index")
    overlay_cover: Optional[List[OverlayLayerPatch]] = None
    overlay_pages: Optional[List[List[OverlayLayerPatch]]] = None
    overlay_ending: Optional[List[OverlayLayerPatch]] = None
    disable_overlay: bool = False


class OutputFile(BaseModel):
    kind: str
    filename: str
    path: str


class RenderResult(ConfigSection):
    cover: str
    texts: List[str]
    ending: str
    output_dir: str
    outputs: List[OutputFile] = Field(default_factory=list)


# ============================================================================
# Override merging (pure: the base config is never mutated)
# ============================================================================
def _patch(model, patch):
    """Copy of model with every field the patch actually sets (None means unset)"""
    if patch is None:
        return model
    update = {}
    for name in patch.model_fields_set:
        value = getattr(patch, name)
        if value is not None:
            update[name] = copy.deepcopy(value)
    return model.model_copy(update=update, deep=True)


def _patch_by_index(items: list, patches: Optional[Sequence]) -> list:
    if not patches:
        return items
    for i, patch in enumerate(patches):
        if i < len(items):
            items[i] = _patch(items[i], patch)
    return items


def apply_overrides(base: PosterConfig, request: RenderRequest) -> PosterConfig:
    """
    Build the effective config for one render call

    Args:
        base: Base configuration (left untouched)
        request: Render request carrying overrides and texts

    Returns:
        A deep copy of base with every override applied
    """
    merged = base.model_copy(deep=True)
    overrides = request.overrides

    if overrides is not None:
        merged.output = _patch(merged.output, overrides.output)
        merged.image = _patch(merged.image, overrides.image)
        merged.templates = _patch(merged.templates, overrides.templates)
        _patch_by_index(merged.title, overrides.title)
        _patch_by_index(merged.pages, overrides.pages)
        _patch_by_index(merged.overlay, overrides.overlay)

    for i, text in enumerate(request.title_texts or []):
        if i < len(merged.title):
            merged.title[i].text = text
    for i, text in enumerate(request.pages or []):
        if i < len(merged.pages):
            merged.pages[i].text = text

    if request.disable_overlay:
        for layer in merged.overlay:
            layer.enable = False

    return merged


def resolve_overlay(
    base: Optional[Sequence[OverlayLayer]],
    patch: Optional[Sequence[OverlayLayerPatch]] = None,
) -> Optional[List[OverlayLayer]]:
    """
    Copy the configured layers and apply a per-page patch by index

    Patch entries without a matching base layer are ignored.
    """
    if base is None:
        return None
    layers = [layer.model_copy(deep=True) for layer in base]
    return _patch_by_index(layers, patch)


# ============================================================================
# Render pipeline
# ============================================================================
class PosterComposer:
    """
    Complete poster rendering pipeline: cover, content pages, ending
    """

    def __init__(
        self,
        base_config: PosterConfig = None,
        rng: RandomSource = None,
        project_root: Path = None,
    ):
        """
        Initialize composer

        Args:
            base_config: Base configuration (default: settings.poster_config())
            rng: Random source for overlays (default: random.Random())
            project_root: Root for relative config paths (default: settings.PROJECT_ROOT)
        """
        self.base_config = base_config or settings.poster_config()
        self.compositor = OverlayCompositor(rng)
        self.project_root = project_root or settings.PROJECT_ROOT

    def _abs(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else (self.project_root / candidate).resolve()

    def render_all(self, request: RenderRequest) -> RenderResult:
        """
        Render every poster page for a request

        Args:
            request: Render request

        Returns:
            Paths of the written files

        Raises:
            TemplateFileMissingError: a template background is missing
        """
        cfg = apply_overrides(self.base_config, request)

        fonts = FontRegistry(cfg.fonts, project_root=self.project_root)
        fonts.register_all()
        text_renderer = TextBlockRenderer(fonts)

        ingestor = TemplateIngestor(self._abs(cfg.templates.base_dir))
        template = ingestor.load_template(request.template_name or cfg.templates.default_name)

        exporter = Exporter(self._abs(cfg.output.directory), cfg.output)
        out_dir = exporter.output_dir_for(request.title_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        size = (cfg.image.width, cfg.image.height)
        width, height = size
        cover_base = load_background(template.cover_path, size)
        text_base = load_background(template.text_path, size)
        ending_base = load_background(template.ending_path, size)

        logger.info(f"Rendering '{request.title_dir}' with template '{template.name}' ({width}x{height})")

        outputs: List[OutputFile] = []

        def record(kind: str, path: Path) -> str:
            outputs.append(OutputFile(kind=kind, filename=path.name, path=str(path)))
            return str(path)

        # 1. Cover
        canvas = cover_base.copy()
        self.compositor.composite(
            canvas, width, height, resolve_overlay(cfg.overlay, request.overlay_cover), template.assets
        )
        draw = ImageDraw.Draw(canvas)
        for style in cfg.title:
            block = TextBlock.from_style(
                style,
                default_font_size=settings.TITLE_FONT_SIZE,
                default_chars_per_line=settings.TITLE_CHARS_PER_LINE,
                max_lines=1,
            )
            text_renderer.draw_block(draw, style.text or "", block)
        cover_path = record("cover", exporter.save(canvas, out_dir, "cover"))

        # 2. Content pages
        texts: List[str] = []
        page_count = min(len(cfg.pages), settings.MAX_RENDERED_PAGES)
        for p in range(page_count):
            style = cfg.pages[p]
            if not style.text:
                continue

            canvas = text_base.copy()
            page_patch = request.overlay_pages[p] if request.overlay_pages and p < len(request.overlay_pages) else None
            self.compositor.composite(
                canvas, width, height, resolve_overlay(cfg.overlay, page_patch), template.assets
            )
            block = TextBlock.from_style(
                style,
                default_font_size=settings.PAGE_FONT_SIZE,
                default_chars_per_line=settings.DEFAULT_CHARS_PER_LINE,
            )
            text_renderer.draw_block(ImageDraw.Draw(canvas), style.text, block)
            texts.append(record(f"text_{p + 1}", exporter.save(canvas, out_dir, f"text_{p + 1}")))

        # 3. Ending
        canvas = ending_base.copy()
        self.compositor.composite(
            canvas, width, height, resolve_overlay(cfg.overlay, request.overlay_ending), template.assets
        )
        ending_path = record("ending", exporter.save(canvas, out_dir, "ending"))

        logger.info(f"Rendered {len(outputs)} files into {out_dir}")

        return RenderResult(
            cover=cover_path,
            texts=texts,
            ending=ending_path,
            output_dir=str(out_dir),
            outputs=outputs,
        )
