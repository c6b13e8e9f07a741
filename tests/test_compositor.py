import numpy as np
import pytest

from conftest import solid
from ssim_playground.errors import DimensionMismatchError
from ssim_playground.models.algorithm import Algorithm
from ssim_playground.models.highlight_color import highlight_color
from ssim_playground.models.scalar_map import ChangeMask
from ssim_playground.services.compositor_service import composite_diff


def checkerboard_mask(height, width):
    mask = (np.indices((height, width)).sum(axis=0) % 2).astype(bool)
    return ChangeMask(mask=mask, algorithm=Algorithm.SSIM)


@pytest.mark.parametrize("color, expected", [
    ((40,), (255,)),
    ((40, 90), (255, 255)),
    ((40, 50, 60), (255, 0, 255)),
    ((40, 50, 60, 70), (255, 0, 255, 255)),
])
def test_changed_pixels_use_band_matched_highlight(color, expected):
    reference = solid(4, 3, color)
    mask = checkerboard_mask(3, 4)
    diff = composite_diff(reference, mask)
    assert diff.pixels.shape == reference.pixels.shape
    assert np.all(diff.pixels[mask.mask] == expected)
    assert np.all(diff.pixels[~mask.mask] == color)


def test_every_pixel_is_highlight_or_reference(noisy_pair):
    reference, _ = noisy_pair
    rng = np.random.default_rng(11)
    mask = ChangeMask(mask=rng.random((reference.height, reference.width)) > 0.6, algorithm=Algorithm.EXACT)
    diff = composite_diff(reference, mask)
    highlight = highlight_color(reference.bands)
    is_highlight = np.all(diff.pixels == highlight, axis=2)
    is_reference = np.all(diff.pixels == reference.pixels, axis=2)
    assert np.all(is_highlight | is_reference)
    assert np.all(is_highlight[mask.mask])


def test_reference_is_not_modified():
    reference = solid(2, 2, (1, 2, 3))
    before = reference.pixels.copy()
    composite_diff(reference, ChangeMask(mask=np.ones((2, 2), dtype=bool), algorithm=Algorithm.SSIM))
    np.testing.assert_array_equal(reference.pixels, before)


def test_mask_shape_must_match_reference():
    with pytest.raises(DimensionMismatchError):
        composite_diff(solid(3, 3, (0, 0, 0)), checkerboard_mask(2, 3))
