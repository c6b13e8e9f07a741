from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass(frozen=True, eq=False)
class Image:
    """
    Simple data object: dense uint8 pixels (+ optional source path for bookkeeping).
    A 2-D array is stored as a single band so every Image is (H, W, bands).
    """
    pixels: np.ndarray  # Shape (H, W, bands), dtype uint8, bands in grey/grey+alpha/RGB/RGBA order.
    path: Path | None = None  # Source of the image.

    def __post_init__(self):
        pixels = np.asarray(self.pixels)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        if pixels.ndim != 3:
            raise ValueError(f"Image pixels must be 2-D or 3-D, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise TypeError(f"Image pixels must be uint8, got {pixels.dtype}")
        # Read-only view: the caller's array stays writable, this one does not.
        pixels = pixels.view()
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def bands(self) -> int:
        return self.pixels.shape[2]

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @property
    def size_label(self) -> str:
        return f"{self.width}×{self.height}"
