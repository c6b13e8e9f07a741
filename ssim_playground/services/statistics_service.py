import numpy as np

from ..errors import DimensionMismatchError
from ..models.comparison_stats import ComparisonStats
from ..models.scalar_map import ChangeMask, ScalarMap


def _finite(value) -> float:
    # NaN -> 0.0, ±Inf -> largest finite float of the same sign.
    return float(np.nan_to_num(value, nan=0.0))


def summarize(scalar_map: ScalarMap, change_mask: ChangeMask) -> ComparisonStats:
    """Reduce a ScalarMap and its ChangeMask to the reported summary numbers."""
    if change_mask.shape != scalar_map.values.shape:
        raise DimensionMismatchError(
            f"Mask {change_mask.shape} does not match map {scalar_map.values.shape}"
        )

    total_pixels = scalar_map.total_pixels
    changed_fraction = change_mask.changed_count / total_pixels
    values = np.nan_to_num(scalar_map.values, nan=0.0)

    return ComparisonStats(
        algorithm=scalar_map.algorithm,
        min=round(_finite(np.min(values)), 4),
        max=round(_finite(np.max(values)), 4),
        mean=round(_finite(np.mean(values)), 4),
        changed_count=int(round(changed_fraction * total_pixels)),
        changed_percent=round(changed_fraction * 100, 2),
        total_pixels=total_pixels,
        width=scalar_map.width,
        height=scalar_map.height,
    )
