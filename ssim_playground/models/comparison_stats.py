from __future__ import annotations
from dataclasses import dataclass

from .algorithm import Algorithm


@dataclass(frozen=True)
class ComparisonStats:
    """
    Summary numbers for one algorithm's ScalarMap and ChangeMask.
    min/max/mean are rounded to 4 dp, changed_percent to 2 dp.
    """
    algorithm: Algorithm
    min: float
    max: float
    mean: float
    changed_count: int
    changed_percent: float
    total_pixels: int
    width: int
    height: int

    @property
    def image_size(self) -> str:
        return f"{self.width}×{self.height}"

    def as_report(self) -> dict:
        """Flatten into the prefixed keys used by the HTTP response."""
        prefix = self.algorithm.value
        return {
            f"{prefix}_min": self.min,
            f"{prefix}_max": self.max,
            f"{prefix}_avg": self.mean,
            f"{prefix}_changed_pixels": self.changed_count,
            f"{prefix}_changed_percent": self.changed_percent,
        }
