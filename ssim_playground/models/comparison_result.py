from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

from .algorithm import Algorithm
from .comparison_stats import ComparisonStats
from .image import Image
from .scalar_map import ChangeMask, ScalarMap


@dataclass(frozen=True, eq=False)
class AlgorithmResult:
    """Everything one scorer contributes to a comparison."""
    scalar_map: ScalarMap
    change_mask: ChangeMask
    diff_image: Image
    stats: ComparisonStats


@dataclass(frozen=True, eq=False)
class ComparisonResult:
    """
    Output of a single comparison request.
    Holds the normalized input pair plus one AlgorithmResult per algorithm.
    """
    first: Image
    second: Image
    threshold: float
    ignore_luminance: bool
    blur_radius: float
    c1: float
    c2: float
    results: Dict[Algorithm, AlgorithmResult] = field(default_factory=dict)

    def __getitem__(self, algorithm: Algorithm) -> AlgorithmResult:
        return self.results[algorithm]

    @property
    def total_pixels(self) -> int:
        return self.first.total_pixels

    @property
    def image_size(self) -> str:
        return self.first.size_label

    def stats_dict(self) -> dict:
        """Flat, JSON-ready statistics for every algorithm plus shared fields."""
        stats = {
            "threshold": self.threshold,
            "blur_radius": self.blur_radius,
            "c1": self.c1,
            "c2": self.c2,
        }
        for algorithm in Algorithm:
            if algorithm in self.results:
                stats.update(self.results[algorithm].stats.as_report())
        stats["total_pixels"] = self.total_pixels
        stats["image_size"] = self.image_size
        return stats
