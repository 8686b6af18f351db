from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from theme_builder.config import ThemeConfig

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)
TRANSPARENT = (0, 0, 0, 0)

THEME_CONF = """\
# rEFInd-Minimalist theme
include themes/rEFInd-Minimalist/theme.conf
banner themes/rEFInd-Minimalist/background.png
selection_big themes/rEFInd-Minimalist/selection_big.png
"""


def _solid(width: int, height: int, rgba=RED) -> np.ndarray:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return pixels


def _write_png(path: Path, pixels: np.ndarray) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    PILImage.fromarray(pixels).save(path, format="PNG")
    return path


@pytest.fixture
def solid():
    return _solid


@pytest.fixture
def write_png():
    return _write_png


@pytest.fixture
def random_rgba():
    rng = np.random.default_rng(1234)

    def make(width: int = 16, height: int = 12) -> np.ndarray:
        return rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)

    return make


@pytest.fixture
def theme_root(tmp_path: Path) -> Path:
    """A complete, small project tree: icons, templates, selections and theme.conf."""
    _write_png(tmp_path / "icons" / "os_test.png", _solid(32, 32, RED))
    _write_png(tmp_path / "icons" / "func_about.png", _solid(48, 48, BLUE))
    (tmp_path / "icons" / "README.txt").write_text("not an image")

    templates = tmp_path / "templates"
    _write_png(templates / "bg_1080.png", _solid(800, 600, BLUE))
    _write_png(templates / "button_big_alpha.png", _solid(256, 256, GREEN))
    _write_png(templates / "button_small_alpha.png", _solid(64, 64, GREEN))
    _write_png(templates / "button_down_big_alpha.png", _solid(256, 256, WHITE))
    _write_png(templates / "button_down_small_alpha.png", _solid(64, 64, WHITE))

    _write_png(tmp_path / "selection_big.png", _solid(100, 100, WHITE))
    _write_png(tmp_path / "selection_small.png", _solid(40, 40, WHITE))
    (tmp_path / "theme.conf").write_text(THEME_CONF, encoding="utf-8")
    return tmp_path


@pytest.fixture
def theme_config(theme_root: Path) -> ThemeConfig:
    return ThemeConfig.for_root(theme_root)


def read_png(path: Path) -> np.ndarray:
    with PILImage.open(path) as img:
        return np.array(img.convert("RGBA"))


@pytest.fixture
def load_png():
    return read_png
