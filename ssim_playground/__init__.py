"""
SSIM Playground: pixel-level and structural difference maps between two images.
"""

from .errors import (
    ComparisonCancelledError,
    ComparisonError,
    ComparisonTimeoutError,
    DimensionMismatchError,
    ImageDecodeError,
    InvalidThresholdError,
    UnsupportedBandCountError,
)
from .models import Algorithm, ComparisonResult, ComparisonStats, Image
from .pipeline import compare_images

__version__ = "1.0.0"

__all__ = [
    "Algorithm",
    "ComparisonCancelledError",
    "ComparisonError",
    "ComparisonResult",
    "ComparisonStats",
    "ComparisonTimeoutError",
    "DimensionMismatchError",
    "Image",
    "ImageDecodeError",
    "InvalidThresholdError",
    "UnsupportedBandCountError",
    "compare_images",
]
