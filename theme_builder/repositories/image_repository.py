from pathlib import Path
from typing import Callable, Iterator, Union
import logging
import re

import numpy as np
from PIL import Image as PILImage

from ..models.image import NamedImage
from ..exceptions import TemplateNotFoundError

logger = logging.getLogger(__name__)

OS_ICON_PATTERN = re.compile(r"^os_.*\.png$")

# Everything Pillow raises for a file it cannot turn into pixels
DECODE_ERRORS = (OSError, ValueError, PILImage.DecompressionBombError)


def is_os_icon(name: str) -> bool:
    return OS_ICON_PATTERN.match(name) is not None


def is_other_icon(name: str) -> bool:
    return not is_os_icon(name)


class ImageRepository:
    """
    Handles file I/O for NamedImage entities.
    """

    @staticmethod
    def load(path: Union[str, Path], name: str = None) -> NamedImage:
        """Decode *path* into an RGBA NamedImage. Raises one of DECODE_ERRORS when unreadable."""
        path = Path(path)
        with PILImage.open(path) as pil_img:
            arr = np.array(pil_img.convert("RGBA"), dtype=np.uint8)
        return NamedImage(name=name or path.name, pixels=arr)

    def load_template(self, path: Union[str, Path], name: str = None) -> NamedImage:
        """Like load(), but a template the build cannot do without: failures are fatal."""
        path = Path(path)
        if not path.is_file():
            raise TemplateNotFoundError(path)
        try:
            return self.load(path, name)
        except DECODE_ERRORS as err:
            raise TemplateNotFoundError(path, f"could not be decoded ({err})") from err

    @staticmethod
    def save(image: NamedImage, folder: Union[str, Path]) -> Path:
        """Write *image* as PNG to folder/name, overwriting any existing file."""
        target = Path(folder) / image.name
        with open(target, "wb") as fh:
            PILImage.fromarray(image.pixels).save(fh, format="PNG")
        logger.debug(f"Wrote {target}")
        return target

    def iter_dir(
        self,
        folder: Union[str, Path],
        predicate: Callable[[str], bool] = lambda name: True,
    ) -> Iterator[NamedImage]:
        """
        Yield NamedImage objects one at a time.  Nothing accumulates in memory.
        Files that fail to decode are skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        for p in sorted(folder.iterdir()):
            if not p.is_file() or not predicate(p.name):
                continue
            try:
                image = self.load(p)
            except DECODE_ERRORS as err:
                logger.warning(f"Skipping {p.name}: {err}")
                continue
            logger.debug(f"Loaded {p.name}: {image.width}x{image.height}")
            yield image
