import sys
from pathlib import Path
from typing import Sequence

import pytest
from PIL import Image

# Ensure the project root is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import ImageConfig, OutputConfig, TemplatesConfig, settings  # noqa: E402


class FixedRandom:
    """uniform() driven by a repeating list of fractions in [0, 1]"""

    def __init__(self, fractions: Sequence[float] = (0.5,)):
        self.fractions = list(fractions)
        self.calls = 0

    def uniform(self, a: float, b: float) -> float:
        fraction = self.fractions[self.calls % len(self.fractions)]
        self.calls += 1
        return a + (b - a) * fraction


class NoRandom:
    """Fails the test if any random value is drawn"""

    def uniform(self, a: float, b: float) -> float:
        raise AssertionError("unexpected random draw")


def _solid(path: Path, size, color) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path)
    return path


@pytest.fixture
def make_rng():
    return FixedRandom


@pytest.fixture
def no_rng():
    return NoRandom()


@pytest.fixture
def template_root(tmp_path) -> Path:
    """<tmp>/templates/default with three backgrounds and two overlay assets"""
    root = tmp_path / "templates"
    default = root / "default"
    _solid(default / "cover.png", (100, 120), (255, 255, 255, 255))
    _solid(default / "text.png", (100, 120), (240, 240, 240, 255))
    _solid(default / "ending.png", (100, 120), (200, 200, 200, 255))
    _solid(default / "assets" / "b_star.png", (10, 10), (0, 0, 255, 255))
    _solid(default / "assets" / "a_dot.png", (10, 10), (255, 0, 0, 255))
    return root


@pytest.fixture
def red_asset(tmp_path) -> Path:
    return _solid(tmp_path / "red.png", (10, 10), (255, 0, 0, 255))


@pytest.fixture
def poster_config(template_root, tmp_path):
    """Base config pointing at the temporary template and output dirs"""
    cfg = settings.poster_config()
    cfg.fonts = {}
    cfg.templates = TemplatesConfig(base_dir=str(template_root), default_name="default")
    cfg.output = OutputConfig(directory=str(tmp_path / "output"), format="png", quality=0.9)
    cfg.image = ImageConfig(width=200, height=250)
    return cfg
