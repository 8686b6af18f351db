"""
Stage adapters: lift per-image ImageService operations into lazy
Iterator[NamedImage] -> Iterator[NamedImage] stages for a Pipeline.

Every stage is a generator adapter, so nothing is decoded or drawn until the
pipeline's final write loop pulls the next image.
"""
from __future__ import annotations
from typing import Callable, Iterator, Tuple

import numpy as np

from ..models.image import NamedImage
from ..services.image_service import ImageService

ImageStream = Iterator[NamedImage]
Stage = Callable[[ImageStream], ImageStream]

_default_service = ImageService()


def map_images(fn: Callable[[NamedImage], NamedImage]) -> Stage:
    def stage(stream: ImageStream) -> ImageStream:
        return (fn(img) for img in stream)
    return stage


def map_pixels(fn: Callable[[np.ndarray], np.ndarray]) -> Stage:
    """Replace each image's pixels with fn(pixels), keeping its name."""
    return map_images(lambda img: NamedImage(name=img.name, pixels=fn(img.pixels)))


def rename_with(fn: Callable[[str], str]) -> Stage:
    return map_images(lambda img: NamedImage(name=fn(img.name), pixels=img.pixels))


def rename(name: str) -> Stage:
    return rename_with(lambda _: name)


def scale_to(width: int, height: int = None, *, service: ImageService = _default_service) -> Stage:
    return map_pixels(lambda px: service.scale_to(px, width, height))


def center_fit_to(width: int, height: int = None, *, service: ImageService = _default_service) -> Stage:
    return map_pixels(lambda px: service.center_fit_to(px, width, height))


def tint(color: Tuple[int, int, int], alpha: float, *, service: ImageService = _default_service) -> Stage:
    return map_pixels(lambda px: service.tint(px, color, alpha))


def add_background(background: np.ndarray, *, service: ImageService = _default_service) -> Stage:
    return map_pixels(lambda px: service.add_background(px, background))


def bake_icons(
    icon: np.ndarray,
    count: int,
    *,
    x_padding: int = None,
    y_padding: int = None,
    row: bool = True,
    service: ImageService = _default_service,
) -> Stage:
    return map_pixels(
        lambda px: service.bake_icons(px, icon, count, x_padding=x_padding, y_padding=y_padding, row=row)
    )


def deferred(factory: Callable[[], Stage]) -> Stage:
    """
    Build the real stage only when the pipeline runs, e.g. to load a
    template image that a disabled stage should never touch.
    """
    def stage(stream: ImageStream) -> ImageStream:
        return factory()(stream)
    return stage
