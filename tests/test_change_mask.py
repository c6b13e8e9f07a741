import math

import numpy as np
import pytest

from ssim_playground.errors import InvalidThresholdError
from ssim_playground.models.algorithm import Algorithm
from ssim_playground.models.scalar_map import ScalarMap
from ssim_playground.services.change_mask_service import build_change_mask, validate_threshold


def make_map(values, algorithm):
    return ScalarMap(values=np.asarray(values, dtype=np.float64), algorithm=algorithm)


def test_similarity_map_flags_scores_below_threshold():
    mask = build_change_mask(make_map([[0.5, 0.99], [0.949, 0.95]], Algorithm.SSIM), 0.95)
    np.testing.assert_array_equal(mask.mask, [[True, False], [True, False]])
    assert mask.algorithm is Algorithm.SSIM
    assert mask.changed_count == 2


def test_distance_map_flags_distances_above_inverted_threshold():
    mask = build_change_mask(make_map([[0.01, 0.1], [0.0, 1.0]], Algorithm.COLOR_DISTANCE), 0.95)
    np.testing.assert_array_equal(mask.mask, [[False, True], [False, True]])


def test_ssim_threshold_extremes():
    ssim_map = make_map([[0.0, 0.3], [0.7, 0.999]], Algorithm.SSIM)
    assert build_change_mask(ssim_map, 0.0).changed_count == 0
    assert build_change_mask(ssim_map, 1.0).changed_count == 4


def test_exact_map_only_reacts_at_zero_threshold():
    exact = make_map([[0.0, 1.0], [1.0, 0.0]], Algorithm.EXACT)
    assert build_change_mask(exact, 0.0).changed_count == 0
    for threshold in (0.01, 0.5, 0.95, 1.0):
        assert build_change_mask(exact, threshold).changed_count == 2


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_changed_count_is_monotonic_in_threshold(algorithm):
    rng = np.random.default_rng(3)
    values = rng.random((20, 20))
    if algorithm is Algorithm.EXACT:
        values = (values > 0.5).astype(np.float64)
    scalar_map = make_map(values, algorithm)
    counts = [build_change_mask(scalar_map, t).changed_count for t in np.linspace(0, 1, 21)]
    assert counts == sorted(counts)


@pytest.mark.parametrize("threshold", [-0.01, 1.01, math.nan, "abc", None])
def test_invalid_threshold_is_rejected(threshold):
    with pytest.raises(InvalidThresholdError):
        build_change_mask(make_map([[0.5]], Algorithm.SSIM), threshold)


def test_threshold_accepts_numeric_strings():
    assert validate_threshold("0.25") == 0.25
    assert isinstance(InvalidThresholdError("x"), ValueError)
