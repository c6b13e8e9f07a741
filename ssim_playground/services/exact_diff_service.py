import numpy as np

from ..models.algorithm import Algorithm
from ..models.image import Image
from ..models.scalar_map import ScalarMap
from .image_service import ImageService


class ExactDiffService:
    """Byte-exact RGB comparison: 1.0 where any of R, G, B differs, else 0.0."""

    def __init__(self):
        self.image_service = ImageService()

    def score(self, first: Image, second: Image) -> ScalarMap:
        a = self.image_service.to_rgb(first).astype(np.int16)
        b = self.image_service.to_rgb(second).astype(np.int16)

        diff = np.abs(a - b).sum(axis=2)
        return ScalarMap(values=(diff > 0).astype(np.float64), algorithm=Algorithm.EXACT)
