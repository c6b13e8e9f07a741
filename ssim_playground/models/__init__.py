from .algorithm import Algorithm, MapKind
from .comparison_result import AlgorithmResult, ComparisonResult
from .comparison_stats import ComparisonStats
from .highlight_color import highlight_color
from .image import Image
from .scalar_map import ChangeMask, ScalarMap

__all__ = [
    "Algorithm",
    "AlgorithmResult",
    "ChangeMask",
    "ComparisonResult",
    "ComparisonStats",
    "Image",
    "MapKind",
    "ScalarMap",
    "highlight_color",
]
