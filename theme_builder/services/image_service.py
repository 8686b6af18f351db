from typing import Tuple
import logging

import numpy as np
import cv2

from ..config import x_padding_for, y_padding_for
from ..models.tint import Tint

logger = logging.getLogger(__name__)


class ImageService:
    """
    Drawing-level helpers for RGBA pixel buffers.  No file I/O here.

    Every method returns a freshly allocated canvas; inputs are never mutated.
    Buffers are (H, W, 4) uint8 arrays, straight (non-premultiplied) alpha.
    """

    def __init__(self, bake_x_padding: int = None, bake_y_padding: int = None):
        self.bake_x_padding = x_padding_for() if bake_x_padding is None else bake_x_padding
        self.bake_y_padding = (
            bake_y_padding if bake_y_padding is not None
            else y_padding_for(self.bake_x_padding)
        )

    # ─── canvas helpers ───────────────────────────────────────────────
    @staticmethod
    def create_canvas(width: int, height: int) -> np.ndarray:
        """Fully transparent canvas."""
        return np.zeros((height, width, 4), dtype=np.uint8)

    @staticmethod
    def _window(canvas: np.ndarray, src: np.ndarray, x: int, y: int):
        """Part of *src* placed at (x, y) that lands on *canvas*, or None."""
        ch, cw = canvas.shape[:2]
        sh, sw = src.shape[:2]
        left, top = max(x, 0), max(y, 0)
        right, bottom = min(x + sw, cw), min(y + sh, ch)
        if left >= right or top >= bottom:
            return None
        return (slice(top, bottom), slice(left, right)), (slice(top - y, bottom - y), slice(left - x, right - x))

    def _paste(self, canvas: np.ndarray, src: np.ndarray, x: int, y: int) -> None:
        """Copy *src* verbatim onto a fresh *canvas* at (x, y), clipped."""
        window = self._window(canvas, src, x, y)
        if window is None:
            return
        dst_idx, src_idx = window
        canvas[dst_idx] = src[src_idx]

    def _draw(self, canvas: np.ndarray, src: np.ndarray, x: int, y: int) -> None:
        """
        Source-over composite *src* onto *canvas* in place, top-left at (x, y).
        Anything outside the canvas is clipped.
        """
        window = self._window(canvas, src, x, y)
        if window is None:
            return
        dst_idx, src_idx = window

        fg = src[src_idx].astype(np.float32) / 255.0
        bg = canvas[dst_idx].astype(np.float32) / 255.0

        fg_a = fg[..., 3:4]
        bg_a = bg[..., 3:4]
        out_a = fg_a + bg_a * (1.0 - fg_a)

        premult = fg[..., :3] * fg_a + bg[..., :3] * bg_a * (1.0 - fg_a)
        out_rgb = np.divide(premult, out_a, out=np.zeros_like(premult), where=out_a > 0)

        region = np.concatenate([out_rgb, out_a], axis=-1)
        canvas[dst_idx] = np.clip(np.rint(region * 255.0), 0, 255).astype(np.uint8)

    @staticmethod
    def _resize(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
        """
        Bilinear resample on premultiplied colour, so fully transparent
        pixels don't bleed their (meaningless) RGB into the edges.
        """
        rgba = pixels.astype(np.float32)
        alpha = rgba[..., 3:4] / 255.0
        premult = np.concatenate([rgba[..., :3] * alpha, rgba[..., 3:4]], axis=-1)

        resized = cv2.resize(premult, (width, height), interpolation=cv2.INTER_LINEAR)

        out_a = resized[..., 3:4]
        out_rgb = np.divide(resized[..., :3] * 255.0, out_a,
                            out=np.zeros_like(resized[..., :3]), where=out_a > 0)
        out = np.concatenate([out_rgb, out_a], axis=-1)
        return np.clip(np.rint(out), 0, 255).astype(np.uint8)

    # ─── transform primitives ─────────────────────────────────────────
    def scale_to(self, pixels: np.ndarray, width: int, height: int = None) -> np.ndarray:
        """Stretch to exactly width x height (height defaults to width)."""
        height = width if height is None else height
        if width <= 0 or height <= 0:
            raise ValueError(f"Target size must be positive, got {width}x{height}")
        return self._resize(pixels, width, height)

    def center_fit_to(self, pixels: np.ndarray, width: int, height: int = None) -> np.ndarray:
        """
        Place the image, unscaled, in the middle of a transparent width x height canvas.
        A larger image gets a negative offset and is clipped by the canvas.
        """
        height = width if height is None else height
        canvas = self.create_canvas(width, height)
        h, w = pixels.shape[:2]
        self._paste(canvas, pixels, int((width - w) / 2), int((height - h) / 2))
        return canvas

    def tint(self, pixels: np.ndarray, color: Tuple[int, int, int], alpha: float) -> np.ndarray:
        return Tint(color=tuple(color), alpha=alpha).apply(pixels)

    def add_background(self, pixels: np.ndarray, background: np.ndarray) -> np.ndarray:
        """Stretch *background* to the image size and draw the image on top of it."""
        h, w = pixels.shape[:2]
        canvas = self._resize(background, w, h)
        self._draw(canvas, pixels, 0, 0)
        return canvas

    def bake_icons(
        self,
        base: np.ndarray,
        icon: np.ndarray,
        count: int,
        x_padding: int = None,
        y_padding: int = None,
        row: bool = True,
    ) -> np.ndarray:
        """
        Stamp *count* copies of *icon* on top of *base*, centred as one
        horizontal run.  With row=False the run is pushed down by y_padding,
        which is how the second (small icon) line sits under the first.

        Args:
            base: image to draw on, kept at its own size
            icon: image stamped unscaled
            count: number of copies, 0 draws nothing
            x_padding: gap between neighbouring copies
            y_padding: vertical shift applied when row is False
            row: True for the main line, False for the line below it
        Returns:
            (np.ndarray): the baked canvas
        """
        if count < 0:
            raise ValueError(f"Icon count must be non-negative, got {count}")
        x_padding = self.bake_x_padding if x_padding is None else x_padding
        y_padding = self.bake_y_padding if y_padding is None else y_padding

        big_h, big_w = base.shape[:2]
        h, w = icon.shape[:2]

        canvas = base.copy()

        step_x = w + x_padding
        start_x = int((big_w + x_padding - step_x * count) / 2)
        start_y = int((big_h - h) / 2) + (0 if row else y_padding)

        for i in range(count):
            self._draw(canvas, icon, start_x + step_x * i, start_y)

        logger.debug(f"Baked {count} icon(s) of {w}x{h} starting at ({start_x}, {start_y})")
        return canvas
