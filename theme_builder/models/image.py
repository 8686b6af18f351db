from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class NamedImage:
    """
    Simple data object: RGBA pixels paired with the filename they are written under.
    No drawing logic outside the services.
    """
    name: str # Output filename, e.g. "os_linux.png".
    pixels: np.ndarray # Shape (H, W, 4), dtype uint8, RGBA order.

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]
