from __future__ import annotations

import logging
import math
from typing import Callable, Optional

import cv2
import numpy as np

from ..models.algorithm import Algorithm
from ..models.image import Image
from ..models.scalar_map import ScalarMap
from .image_service import ImageService

logger = logging.getLogger(__name__)

# Values from the SSIM paper (Wang et al. 2004). Not configurable.
BLUR_RADIUS = 1.5
C1_FACTOR = 0.01
C2_FACTOR = 0.03
DYNAMIC_RANGE = 255
C1 = (C1_FACTOR * DYNAMIC_RANGE) ** 2
C2 = (C2_FACTOR * DYNAMIC_RANGE) ** 2

# Kernel taps below this fraction of the peak are dropped.
MIN_AMPLITUDE = 0.2


def gaussian_kernel_size(sigma: float, min_amplitude: float = MIN_AMPLITUDE) -> int:
    """Odd kernel width keeping every tap with exp(-x²/2σ²) >= min_amplitude."""
    radius = int(math.floor(sigma * math.sqrt(-2.0 * math.log(min_amplitude))))
    return 2 * max(radius, 1) + 1


class SSIMService:
    """
    Windowed structural similarity via Gaussian-weighted local statistics.
    Produces a per-pixel similarity map: 1.0 = identical neighbourhood.
    """

    def __init__(self, blur_radius: float = BLUR_RADIUS):
        self.blur_radius = blur_radius
        ksize = gaussian_kernel_size(blur_radius)
        self._ksize = (ksize, ksize)
        self.image_service = ImageService()

    def blur(self, values: np.ndarray) -> np.ndarray:
        return cv2.GaussianBlur(
            values, self._ksize, sigmaX=self.blur_radius, sigmaY=self.blur_radius,
            borderType=cv2.BORDER_REPLICATE,
        )

    def score(
        self,
        first: Image,
        second: Image,
        ignore_luminance: bool = False,
        checkpoint: Optional[Callable[[], None]] = None,
    ) -> ScalarMap:
        """
        Args:
            first: Normalized reference image
            second: Normalized image to compare, same width/height as *first*
            ignore_luminance: Compare structure and contrast only (CS-SSIM)
            checkpoint: Called between array operations, may raise to abort

        Returns:
            ScalarMap of SSIM scores, lower = more different
        """
        checkpoint = checkpoint or (lambda: None)

        x = self.image_service.to_luminance(first).astype(np.float64)
        y = self.image_service.to_luminance(second).astype(np.float64)

        mean_x = self.blur(x)
        mean_y = self.blur(y)
        checkpoint()

        var_x = self.blur(x * x) - mean_x * mean_x
        var_y = self.blur(y * y) - mean_y * mean_y
        checkpoint()

        covariance = self.blur(x * y) - mean_x * mean_y
        checkpoint()

        if ignore_luminance:
            numerator = 2 * covariance + C2
            denominator = var_x + var_y + C2
        else:
            numerator = (2 * mean_x * mean_y + C1) * (2 * covariance + C2)
            denominator = (mean_x * mean_x + mean_y * mean_y + C1) * (var_x + var_y + C2)

        values = numerator / denominator
        logger.debug(f"SSIM map {values.shape[1]}x{values.shape[0]}, ignore_luminance={ignore_luminance}")
        return ScalarMap(values=values, algorithm=Algorithm.SSIM)
