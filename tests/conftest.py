import numpy as np
import pytest

from ssim_playground.models.image import Image


def solid(width, height, color):
    """Image filled with one pixel value; *color* is a tuple of 1-4 samples."""
    color = np.asarray(color, dtype=np.uint8).reshape(1, 1, -1)
    return Image(np.tile(color, (height, width, 1)))


@pytest.fixture
def grey_pair():
    """Two 4x4 grey (128) images; the second has red = 129 in the top-left 2x2 quadrant."""
    first = solid(4, 4, (128, 128, 128))
    pixels = first.pixels.copy()
    pixels[:2, :2, 0] = 129
    return first, Image(pixels)


@pytest.fixture
def black_white():
    return solid(6, 5, (0, 0, 0)), solid(6, 5, (255, 255, 255))


@pytest.fixture
def noisy_pair():
    rng = np.random.default_rng(7)
    base = rng.integers(0, 256, size=(24, 32, 3), dtype=np.uint8)
    noise = rng.integers(-40, 41, size=base.shape)
    other = np.clip(base.astype(np.int16) + noise, 0, 255).astype(np.uint8)
    return Image(base), Image(other)
