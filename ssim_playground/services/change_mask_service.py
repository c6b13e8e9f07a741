import math

from ..errors import InvalidThresholdError
from ..models.scalar_map import ChangeMask, ScalarMap


def validate_threshold(threshold) -> float:
    """Return *threshold* as a float, or raise InvalidThresholdError."""
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise InvalidThresholdError(f"Threshold must be a number, got {threshold!r}") from None
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise InvalidThresholdError(f"Threshold must be in [0, 1], got {value}")
    return value


def build_change_mask(scalar_map: ScalarMap, threshold: float) -> ChangeMask:
    """
    Threshold a ScalarMap into a ChangeMask.

    One slider means "how sensitive to differences" for every algorithm:
    similarity maps are changed where score < t, distance maps where
    distance > 1 - t. With t = 0.95, SSIM flags similarity below 0.95 and
    colour distance flags anything more than 5 % apart.
    """
    threshold = validate_threshold(threshold)

    if scalar_map.algorithm.is_similarity:
        mask = scalar_map.values < threshold
    else:
        mask = scalar_map.values > (1.0 - threshold)

    return ChangeMask(mask=mask, algorithm=scalar_map.algorithm)
