"""
Theme build pipeline
Turns the source icons and templates into a ready-to-install rEFInd theme.

Five independent pipelines run one after the other:
    1. OS icons        → scaled, tinted, optionally put on a big button
    2. Other icons     → scaled, tinted, optionally put on a small button
    3. Background      → optionally baked with pressed buttons
    4. Big selection   → sized to the big selection canvas
    5. Small selection → sized to the small selection canvas
and finally theme.conf is copied with the theme name patched in.
"""
from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List
import logging
import shutil

from ..config import ThemeConfig, BuildOptions
from ..exceptions import TemplateNotFoundError
from ..models.image import NamedImage
from ..models.tint import Tint
from ..repositories.image_repository import ImageRepository, is_os_icon, is_other_icon
from ..services.image_service import ImageService
from .pipeline import Pipeline
from . import stages

logger = logging.getLogger(__name__)

BIG_ICON_SIZE = 256
SMALL_ICON_SIZE = 64

BACKGROUND_TEMPLATE = "bg_1080.png"
BUTTON_BIG = "button_big_alpha.png"
BUTTON_SMALL = "button_small_alpha.png"
BUTTON_DOWN_BIG = "button_down_big_alpha.png"
BUTTON_DOWN_SMALL = "button_down_small_alpha.png"
SELECTION_BIG = "selection_big.png"
SELECTION_SMALL = "selection_small.png"
BACKGROUND = "background.png"
THEME_CONF = "theme.conf"


@contextmanager
def job(title: str):
    logger.info(f" *** {title} JOB *** ")
    yield
    logger.info(" *** END *** ")


class ThemeBuilder:
    """
    Composes the per-category pipelines.  Paths come from the ThemeConfig
    handed in; nothing here looks at the working directory.
    """

    def __init__(
        self,
        config: ThemeConfig,
        *,
        image_repository: ImageRepository = None,
        image_service: ImageService = None,
    ):
        self.config = config
        self.image_repository = image_repository or ImageRepository()
        self.image_service = image_service or ImageService(
            bake_x_padding=config.bake_x_padding,
            bake_y_padding=config.bake_y_padding,
        )
        self.icon_tint = Tint.from_hex(config.tint_color, config.tint_alpha)

    # ─── sources ──────────────────────────────────────────────────────
    def os_icons(self) -> Iterator[NamedImage]:
        return self.image_repository.iter_dir(self.config.icons_dir, is_os_icon)

    def other_icons(self) -> Iterator[NamedImage]:
        return self.image_repository.iter_dir(self.config.icons_dir, is_other_icon)

    def _single(self, path: Path) -> Iterator[NamedImage]:
        yield self.image_repository.load_template(path)

    def background_image(self) -> Iterator[NamedImage]:
        return self._single(self.config.templates_dir / BACKGROUND_TEMPLATE)

    def selection_big_image(self, bake_bg: bool) -> Iterator[NamedImage]:
        if bake_bg:
            return self._single(self.config.templates_dir / BUTTON_DOWN_BIG)
        return self._single(self.config.root / SELECTION_BIG)

    def selection_small_image(self, bake_bg: bool) -> Iterator[NamedImage]:
        if bake_bg:
            return self._single(self.config.templates_dir / BUTTON_DOWN_SMALL)
        return self._single(self.config.root / SELECTION_SMALL)

    def template(self, name: str) -> NamedImage:
        return self.image_repository.load_template(self.config.templates_dir / name)

    def _pipeline(self) -> Pipeline:
        return Pipeline(self.image_repository)

    # ─── category pipelines ───────────────────────────────────────────
    def _button(self, name: str, size: int = None):
        pixels = self.template(name).pixels
        return pixels if size is None else self.image_service.scale_to(pixels, size)

    def build_os_icons(self, options: BuildOptions) -> List[Path]:
        svc = self.image_service
        return (
            self._pipeline()
            .add(True, stages.scale_to(BIG_ICON_SIZE, service=svc))
            .add(True, stages.tint(self.icon_tint.color, self.icon_tint.alpha, service=svc))
            .add(not options.bake_bg, stages.deferred(
                lambda: stages.add_background(self._button(BUTTON_BIG), service=svc)))
            .execute(self.os_icons(), self.config.build_icons_dir)
        )

    def build_other_icons(self, options: BuildOptions) -> List[Path]:
        svc = self.image_service
        return (
            self._pipeline()
            .add(True, stages.scale_to(SMALL_ICON_SIZE, service=svc))
            .add(True, stages.tint(self.icon_tint.color, self.icon_tint.alpha, service=svc))
            .add(not options.bake_bg, stages.deferred(
                lambda: stages.add_background(self._button(BUTTON_SMALL), service=svc)))
            .execute(self.other_icons(), self.config.build_icons_dir)
        )

    def build_background(self, options: BuildOptions) -> List[Path]:
        svc = self.image_service
        return (
            self._pipeline()
            .add(True, stages.rename(BACKGROUND))
            .add(options.bake_bg, stages.deferred(
                lambda: stages.bake_icons(self._button(BUTTON_BIG, BIG_ICON_SIZE), options.os_icons, service=svc)))
            .add(options.bake_bg, stages.deferred(
                lambda: stages.bake_icons(self._button(BUTTON_SMALL, SMALL_ICON_SIZE), options.other_icons,
                                          row=False, service=svc)))
            .execute(self.background_image(), self.config.build_dir)
        )

    def build_selection_big(self, options: BuildOptions) -> List[Path]:
        return self._build_selection(
            self.selection_big_image(options.bake_bg),
            options.bake_bg,
            icon_size=BIG_ICON_SIZE,
            canvas_size=self.config.selection_big_size,
            name=SELECTION_BIG,
        )

    def build_selection_small(self, options: BuildOptions) -> List[Path]:
        return self._build_selection(
            self.selection_small_image(options.bake_bg),
            options.bake_bg,
            icon_size=SMALL_ICON_SIZE,
            canvas_size=self.config.selection_small_size,
            name=SELECTION_SMALL,
        )

    def _build_selection(self, source, bake_bg: bool, *, icon_size: int, canvas_size: int, name: str) -> List[Path]:
        # Baked backgrounds already show the button, so the selection only
        # needs the pressed overlay at icon size in the middle of its canvas.
        svc = self.image_service
        return (
            self._pipeline()
            .add(not bake_bg, stages.scale_to(canvas_size, service=svc))
            .add(bake_bg, stages.scale_to(icon_size, service=svc))
            .add(bake_bg, stages.center_fit_to(canvas_size, service=svc))
            .add(True, stages.rename(name))
            .execute(source, self.config.build_dir)
        )

    # ─── configuration ────────────────────────────────────────────────
    def migrate_configuration(self) -> Path:
        """Copy theme.conf into the build, swapping the upstream theme name for ours."""
        src = self.config.root / THEME_CONF
        if not src.is_file():
            raise TemplateNotFoundError(src)
        dest = self.config.build_dir / THEME_CONF

        with open(src, "r", encoding="utf-8") as reader, open(dest, "w", encoding="utf-8") as writer:
            for line in reader:
                writer.write(line.rstrip("\r\n").replace(self.config.conf_token, self.config.name) + "\n")

        logger.info(f"Migrated {src.name} → {dest}")
        return dest

    # ─── entry points ─────────────────────────────────────────────────
    def prepare_directories(self) -> None:
        for folder in (self.config.icons_dir, self.config.templates_dir, self.config.build_icons_dir):
            folder.mkdir(parents=True, exist_ok=True)

    def build(self, options: BuildOptions = BuildOptions()) -> List[Path]:
        """Run every category pipeline, then migrate theme.conf. Returns all written paths."""
        written = []
        with job("BUILD"):
            self.prepare_directories()
            logger.info(
                f"Building {self.config.name} into {self.config.build_dir} "
                f"(bake_bg={options.bake_bg}, os_icons={options.os_icons}, other_icons={options.other_icons})"
            )
            for category in (
                self.build_os_icons,
                self.build_other_icons,
                self.build_background,
                self.build_selection_big,
                self.build_selection_small,
            ):
                written.extend(category(options))
            written.append(self.migrate_configuration())
        return written

    def clean(self) -> bool:
        """Delete the build directory. Returns False when there was nothing to delete."""
        with job("CLEAN"):
            return clean(self.config.build_dir)


def clean(path: Path) -> bool:
    path = Path(path)
    if path.is_file() or path.is_symlink():
        path.unlink()
        return True
    if not path.exists():
        logger.info(f"Nothing to clean at {path}")
        return False
    shutil.rmtree(path)
    logger.info(f"Removed {path}")
    return True
