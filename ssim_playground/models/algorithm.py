from enum import Enum


class MapKind(str, Enum):
    SIMILARITY = "similarity"  # higher = more alike
    DISTANCE = "distance"      # higher = more different


class Algorithm(str, Enum):
    """
    The closed set of scoring algorithms.
    The value doubles as the key prefix in comparison reports.
    """
    SSIM = "ssim"
    COLOR_DISTANCE = "delta_e"
    EXACT = "exact"

    @property
    def kind(self) -> MapKind:
        if self is Algorithm.SSIM:
            return MapKind.SIMILARITY
        return MapKind.DISTANCE

    @property
    def is_similarity(self) -> bool:
        return self.kind is MapKind.SIMILARITY
