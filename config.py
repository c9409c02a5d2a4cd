"""
Configuration settings for Poster Card Generator
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


TextAlign = Literal["left", "center", "right", "justify"]
OutputFormat = Literal["png", "jpg", "jpeg", "webp"]


class ConfigSection(BaseModel):
    """Config sections accept camelCase (JSON) and snake_case keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FontDef(ConfigSection):
    path: str
    family: str
    name: str = ""


class TemplatesConfig(ConfigSection):
    base_dir: str = "./template"
    default_name: str = "default"


class OutputConfig(ConfigSection):
    directory: str = "output"
    format: OutputFormat = "png"
    quality: float = 0.9


class ImageConfig(ConfigSection):
    width: int = 1080
    height: int = 1350


class TextStyle(ConfigSection):
    """Configured style of one text slot (title line or page body)"""
    x: float = 0
    y: float = 0
    font_size: Optional[float] = None
    color: Optional[str] = None
    font_family: str = "Yozai-Regular"
    text_align: TextAlign = "left"
    line_height: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    max_lines: Optional[int] = None
    text: str = ""
    enable_inline_markup: bool = True
    chars_per_line: Optional[int] = None


class OverlayPosition(ConfigSection):
    """Per-instance overrides; anything left unset is resolved by the layer"""
    asset: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    scale: Optional[float] = None
    rotation: Optional[float] = None
    alpha: Optional[float] = None


class OverlayLayer(ConfigSection):
    enable: bool = True
    count: float = Field(2, ge=0, le=100, allow_inf_nan=False)
    positions: List[OverlayPosition] = Field(default_factory=list)
    randomize: bool = True
    scale_range: Tuple[float, float] = (0.1, 0.2)
    rotation_range: Tuple[float, float] = (-15, 15)
    alpha_range: Tuple[float, float] = (0.75, 1.0)


class PosterConfig(ConfigSection):
    """Everything a single render call needs"""
    fonts: Dict[str, FontDef] = Field(default_factory=dict)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    title: List[TextStyle] = Field(default_factory=list, max_length=3)
    pages: List[TextStyle] = Field(default_factory=list, max_length=7)
    overlay: List[OverlayLayer] = Field(default_factory=list, max_length=1)
    image: ImageConfig = Field(default_factory=ImageConfig)


def _page_style() -> TextStyle:
    return TextStyle(
        x=100,
        y=500,
        width=1080,
        height=1350,
        font_size=36,
        line_height=45,
        color="#000000",
        font_family="Yozai-Regular",
        max_lines=10,
        chars_per_line=20,
    )


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project paths
    PROJECT_ROOT: Path = Path(__file__).parent
    TEMPLATE_DIR: Path = PROJECT_ROOT / "template"
    DEFAULT_TEMPLATE: str = "default"
    OUTPUT_DIR: Path = PROJECT_ROOT / "output"
    LOG_DIR: Path = PROJECT_ROOT / "logs"

    # Output settings
    OUTPUT_FORMAT: OutputFormat = "png"
    OUTPUT_QUALITY: float = 0.9  # 0-1 fraction, scaled to 1-100 for JPEG/WebP
    IMAGE_WIDTH: int = 1080
    IMAGE_HEIGHT: int = 1350

    # Fonts (relative paths are resolved against PROJECT_ROOT)
    FONTS: Dict[str, FontDef] = {
        "yozai-regular": FontDef(path="./fonts/Yozai-Regular.ttf", family="Yozai-Regular", name="Yozai-Regular"),
        "yozai-medium": FontDef(path="./fonts/Yozai-Medium.ttf", family="Yozai-Medium", name="Yozai-Medium"),
        "yozai-light": FontDef(path="./fonts/Yozai-Light.ttf", family="Yozai-Light", name="Yozai-Light"),
    }

    # Text defaults
    DEFAULT_TEXT_COLOR: str = "#000000"
    DEFAULT_CHARS_PER_LINE: int = 24
    TITLE_CHARS_PER_LINE: int = 100
    TITLE_FONT_SIZE: float = 36
    PAGE_FONT_SIZE: float = 32
    LINE_HEIGHT_RATIO: float = 1.4
    MAX_RENDERED_PAGES: int = 6

    # Cover title lines (max 3)
    TITLE_STYLES: List[TextStyle] = [
        TextStyle(x=300, y=500, font_size=72, color="#000000", font_family="Yozai-Regular"),
        TextStyle(x=200, y=650, font_size=120, color="#000000", font_family="Yozai-Medium", text="hello"),
        TextStyle(x=300, y=900, font_size=72, color="#000000", font_family="Yozai-Regular", text="world!"),
    ]

    # Content pages (max 7)
    PAGE_STYLES: List[TextStyle] = [_page_style() for _ in range(7)]

    # Decorative overlay layers (max 1)
    OVERLAY_LAYERS: List[OverlayLayer] = [
        OverlayLayer(
            enable=True,
            count=2,
            positions=[OverlayPosition(), OverlayPosition()],
            randomize=True,
            scale_range=(0.1, 0.2),
            rotation_range=(-15, 15),
            alpha_range=(0.75, 1.0),
        ),
    ]

    # FastAPI settings
    API_TITLE: str = "Poster Card Generator API"
    API_VERSION: str = "1.0.0"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000

    def poster_config(self) -> PosterConfig:
        """
        Build the base render configuration from settings

        Returns:
            A fresh PosterConfig; callers may mutate it freely
        """
        return PosterConfig(
            fonts={key: font.model_copy() for key, font in self.FONTS.items()},
            templates=TemplatesConfig(base_dir=str(self.TEMPLATE_DIR), default_name=self.DEFAULT_TEMPLATE),
            output=OutputConfig(
                directory=str(self.OUTPUT_DIR),
                format=self.OUTPUT_FORMAT,
                quality=self.OUTPUT_QUALITY,
            ),
            title=[style.model_copy(deep=True) for style in self.TITLE_STYLES[:3]],
            pages=[style.model_copy(deep=True) for style in self.PAGE_STYLES[:7]],
            overlay=[layer.model_copy(deep=True) for layer in self.OVERLAY_LAYERS[:1]],
            image=ImageConfig(width=self.IMAGE_WIDTH, height=self.IMAGE_HEIGHT),
        )


settings = Settings()

# Create directories if they don't exist
for directory in [
    settings.TEMPLATE_DIR,
    settings.OUTPUT_DIR,
]:
    directory.mkdir(parents=True, exist_ok=True)
