from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass(frozen=True)
class Tint:
    """
    Value-object holding a flat RGB colour and how strongly it is blended in.

    alpha 0.0 leaves the image untouched, 1.0 paints every pixel the flat
    colour. The alpha channel of the image is never touched.
    """
    color: Tuple[int, int, int]
    alpha: float = 1.0      # [0.0 , 1.0]

    def __post_init__(self):
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"Tint alpha must be within [0, 1], got {self.alpha}")
        if len(self.color) != 3 or any(not 0 <= c <= 255 for c in self.color):
            raise ValueError(f"Tint color must be an RGB triple of 0-255 values, got {self.color}")

    @classmethod
    def from_hex(cls, rgb: int, alpha: float = 1.0) -> "Tint":
        """Create a Tint from a packed 0xRRGGBB integer."""
        return cls(color=((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF), alpha=alpha)

    # ── Core math ────────────────────────────────────────────────────
    def apply(self, pixels: np.ndarray) -> np.ndarray:
        """
        Blend every pixel towards the tint colour and return a *new* array.

        rgb' = round(rgb * (1 - alpha) + color * alpha), clamped to [0, 255]
        a'   = a
        """
        rgb = pixels[..., :3].astype(np.float32)
        color = np.asarray(self.color, dtype=np.float32)

        blended = np.rint(rgb * (1.0 - self.alpha) + color * self.alpha)

        out = np.empty_like(pixels)
        out[..., :3] = np.clip(blended, 0, 255).astype(np.uint8)
        out[..., 3] = pixels[..., 3]
        return out
