import numpy as np

from ..errors import DimensionMismatchError
from ..models.highlight_color import highlight_color
from ..models.image import Image
from ..models.scalar_map import ChangeMask


def composite_diff(reference: Image, change_mask: ChangeMask) -> Image:
    """
    Paint changed pixels of *reference* with the highlight colour.
    Returns a new Image; every pixel is either the highlight or the original.
    """
    if change_mask.shape != (reference.height, reference.width):
        raise DimensionMismatchError(
            f"Mask {change_mask.shape} does not match image {reference.height}x{reference.width}"
        )

    color = highlight_color(reference.bands)
    pixels = np.where(change_mask.mask[:, :, np.newaxis], color, reference.pixels)
    return Image(pixels=pixels.astype(np.uint8, copy=False))
