from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Dict
import os

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables
load_dotenv()

DEFAULT_THEME_NAME = "rEFInd-Minecraft"
DEFAULT_CONF_TOKEN = "rEFInd-Minimalist"

# Magic constants: a 256 px icon plus its selection rim, a 64 px icon plus its rim
DEFAULT_SELECTION_BIG_SIZE = 256 + 32
DEFAULT_SELECTION_SMALL_SIZE = 64 + 22
DEFAULT_TINT_COLOR = 0x29272A   # lighter shade: 0x403B3C


def x_padding_for(selection_big_size: int = DEFAULT_SELECTION_BIG_SIZE) -> int:
    """Gap between baked big buttons: the selection rim plus a small margin."""
    return (selection_big_size - 256) + 8


def y_padding_for(x_padding: int) -> int:
    """Drop of the small-button line below the big-button line."""
    return 256 // 2 + 64 // 2 + x_padding + 3


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class ThemeConfig:
    """
    Every location and theme constant the builder needs.
    Passed explicitly to the builder; nothing reads the working directory on its own.
    """
    root: Path
    icons_dir: Path
    templates_dir: Path
    build_root: Path
    name: str = DEFAULT_THEME_NAME
    conf_token: str = DEFAULT_CONF_TOKEN
    selection_big_size: int = DEFAULT_SELECTION_BIG_SIZE
    selection_small_size: int = DEFAULT_SELECTION_SMALL_SIZE
    tint_color: int = DEFAULT_TINT_COLOR
    tint_alpha: float = 1.0

    def __post_init__(self):
        for key in ("selection_big_size", "selection_small_size"):
            if getattr(self, key) <= 0:
                raise ConfigurationError(f"{key} must be positive, got {getattr(self, key)}")
        if not 0 <= self.tint_color <= 0xFFFFFF:
            raise ConfigurationError(f"tint_color must be a 0xRRGGBB value, got {self.tint_color:#x}")
        if not 0.0 <= self.tint_alpha <= 1.0:
            raise ConfigurationError(f"tint_alpha must be within [0, 1], got {self.tint_alpha}")

    @property
    def build_dir(self) -> Path:
        return self.build_root / self.name

    @property
    def build_icons_dir(self) -> Path:
        return self.build_dir / "icons"

    @property
    def bake_x_padding(self) -> int:
        return x_padding_for(self.selection_big_size)

    @property
    def bake_y_padding(self) -> int:
        return y_padding_for(self.bake_x_padding)

    @classmethod
    def for_root(cls, root: str | Path, **overrides) -> "ThemeConfig":
        """Conventional layout below *root*: icons/, templates/ and build/."""
        root = Path(root).absolute()
        return cls(
            root=root,
            icons_dir=overrides.pop("icons_dir", root / "icons"),
            templates_dir=overrides.pop("templates_dir", root / "templates"),
            build_root=overrides.pop("build_root", root / "build"),
            **overrides,
        )

    @classmethod
    def from_env(cls) -> "ThemeConfig":
        root = Path(os.getenv("THEME_ROOT") or Path.cwd()).absolute()
        return cls(
            root=root,
            icons_dir=Path(os.getenv("ICONS_DIR") or root / "icons"),
            templates_dir=Path(os.getenv("TEMPLATES_DIR") or root / "templates"),
            build_root=Path(os.getenv("BUILD_DIR") or root / "build"),
            name=os.getenv("THEME_NAME") or DEFAULT_THEME_NAME,
            conf_token=os.getenv("THEME_CONF_TOKEN") or DEFAULT_CONF_TOKEN,
            selection_big_size=_env_int("SELECTION_BIG_SIZE", DEFAULT_SELECTION_BIG_SIZE),
            selection_small_size=_env_int("SELECTION_SMALL_SIZE", DEFAULT_SELECTION_SMALL_SIZE),
            tint_color=_env_int("ICON_TINT_COLOR", DEFAULT_TINT_COLOR),
            tint_alpha=_env_float("ICON_TINT_ALPHA", 1.0),
        )


@dataclass(frozen=True)
class BuildOptions:
    """
    Flags of a single build run.

    bake_bg     - bake pressed buttons into the wallpaper instead of giving
                  every icon its own button background
    os_icons    - how many big buttons to bake
    other_icons - how many small buttons to bake
    """
    bake_bg: bool = False
    os_icons: int = 0
    other_icons: int = 0

    def __post_init__(self):
        if self.os_icons < 0 or self.other_icons < 0:
            raise ConfigurationError("Baked icon counts must be non-negative")

    @staticmethod
    def _to_map(tokens: Iterable[str]) -> Dict[str, str]:
        fields = {}
        for token in tokens:
            token = token.strip().lower()
            if not token:
                continue
            key, sep, value = token.partition("=")
            fields[key] = value if sep else "true"
        return fields

    @staticmethod
    def _count(fields: Dict[str, str], key: str) -> int:
        if key not in fields:
            return 0
        try:
            return int(fields[key])
        except ValueError:
            raise ConfigurationError(f"`{key}` expects a whole number, got {fields[key]!r}") from None

    @classmethod
    def from_args(cls, tokens: Iterable[str]) -> "BuildOptions":
        """
        Parse `build` arguments such as ``bakeBg bakeBg.osIcons=3``.
        Keys are case-insensitive; a bare key means "true".
        """
        fields = cls._to_map(tokens)
        return cls(
            bake_bg="bakebg" in fields,
            os_icons=cls._count(fields, "bakebg.osicons"),
            other_icons=cls._count(fields, "bakebg.othericons"),
        )
