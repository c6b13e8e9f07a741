from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .algorithm import Algorithm


@dataclass(frozen=True, eq=False)
class ScalarMap:
    """
    Per-pixel float64 score produced by one algorithm.
    Same width/height as the compared images, single channel.
    """
    values: np.ndarray  # Shape (H, W), dtype float64.
    algorithm: Algorithm

    @property
    def height(self) -> int:
        return self.values.shape[0]

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def total_pixels(self) -> int:
        return self.values.size


@dataclass(frozen=True, eq=False)
class ChangeMask:
    """Boolean map derived from a ScalarMap: True = pixel counted as changed."""
    mask: np.ndarray  # Shape (H, W), dtype bool.
    algorithm: Algorithm

    @property
    def shape(self) -> tuple[int, int]:
        return self.mask.shape

    @property
    def changed_count(self) -> int:
        return int(np.count_nonzero(self.mask))
