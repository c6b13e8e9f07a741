from .change_mask_service import build_change_mask, validate_threshold
from .color_distance_service import ColorDistanceService
from .compositor_service import composite_diff
from .exact_diff_service import ExactDiffService
from .image_service import ImageService
from .ssim_service import SSIMService
from .statistics_service import summarize

__all__ = [
    "ColorDistanceService",
    "ExactDiffService",
    "ImageService",
    "SSIMService",
    "build_change_mask",
    "composite_diff",
    "summarize",
    "validate_threshold",
]
