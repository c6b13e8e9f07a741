import math

import numpy as np

from ..models.algorithm import Algorithm
from ..models.image import Image
from ..models.scalar_map import ScalarMap
from .image_service import ImageService

# Black (0,0,0) to white (255,255,255): sqrt(255² × 3) ≈ 441.67
MAX_RGB_DISTANCE = math.sqrt(255 * 255 * 3)


class ColorDistanceService:
    """
    Euclidean distance in RGB space, normalized to [0, 1].
    Not CIE Delta E: no perceptual colour space is involved.
    """

    def __init__(self):
        self.image_service = ImageService()

    def score(self, first: Image, second: Image) -> ScalarMap:
        a = self.image_service.to_rgb(first).astype(np.float64)
        b = self.image_service.to_rgb(second).astype(np.float64)

        euclidean = np.sqrt(np.sum((b - a) ** 2, axis=2))
        return ScalarMap(values=euclidean / MAX_RGB_DISTANCE, algorithm=Algorithm.COLOR_DISTANCE)
