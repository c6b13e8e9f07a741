import itertools
import threading

import numpy as np
import pytest

from conftest import solid
from ssim_playground import compare_images
from ssim_playground.errors import (
    ComparisonCancelledError,
    ComparisonTimeoutError,
    InvalidThresholdError,
    UnsupportedBandCountError,
)
from ssim_playground.models.algorithm import Algorithm
from ssim_playground.models.image import Image
from ssim_playground.pipeline import cancellation


def test_identity(noisy_pair):
    first, _ = noisy_pair
    copy = Image(first.pixels.copy())
    stats = compare_images(first, copy, 0.95).stats_dict()
    assert stats["exact_changed_percent"] == 0.0
    assert stats["ssim_min"] == pytest.approx(1.0, abs=1e-6)
    assert stats["delta_e_max"] == pytest.approx(0.0)


def test_black_vs_white(black_white):
    result = compare_images(*black_white, 0.95)
    np.testing.assert_allclose(result[Algorithm.COLOR_DISTANCE].scalar_map.values, 1.0)
    assert result[Algorithm.EXACT].stats.changed_percent == 100.0
    assert result[Algorithm.SSIM].stats.changed_percent == 100.0


def test_quadrant_scenario(grey_pair):
    result = compare_images(*grey_pair, 0.95, parallel=False)
    exact = result[Algorithm.EXACT].stats
    assert exact.changed_count == 4
    assert exact.changed_percent == 25.0

    distance = result[Algorithm.COLOR_DISTANCE].scalar_map.values
    assert distance[0, 0] == pytest.approx(1 / 441.67, rel=1e-4)
    assert np.count_nonzero(distance) == 4

    assert result[Algorithm.SSIM].scalar_map.values.min() > 0.99
    assert result[Algorithm.SSIM].stats.changed_count == 0

    diff = result[Algorithm.EXACT].diff_image.pixels
    assert np.all(diff[:2, :2] == (255, 0, 255))
    assert np.all(diff[2:, 2:] == (128, 128, 128))


def test_stats_dict_shared_fields(grey_pair):
    stats = compare_images(*grey_pair, 0.9).stats_dict()
    assert stats["threshold"] == 0.9
    assert stats["blur_radius"] == 1.5
    assert stats["c1"] == pytest.approx(6.5025)
    assert stats["c2"] == pytest.approx(58.5225)
    assert stats["total_pixels"] == 16
    assert stats["image_size"] == "4×4"
    for prefix in ("ssim", "delta_e", "exact"):
        for suffix in ("min", "max", "avg", "changed_pixels", "changed_percent"):
            assert f"{prefix}_{suffix}" in stats


def test_parallel_and_sequential_agree(noisy_pair):
    parallel = compare_images(*noisy_pair, 0.8, parallel=True)
    sequential = compare_images(*noisy_pair, 0.8, parallel=False)
    assert parallel.stats_dict() == sequential.stats_dict()
    for algorithm in Algorithm:
        np.testing.assert_array_equal(
            parallel[algorithm].diff_image.pixels, sequential[algorithm].diff_image.pixels
        )


def test_changed_count_grows_with_threshold(noisy_pair):
    previous = {algorithm: -1 for algorithm in Algorithm}
    for threshold in np.linspace(0, 1, 11):
        result = compare_images(*noisy_pair, float(threshold), parallel=False)
        for algorithm in Algorithm:
            count = result[algorithm].stats.changed_count
            assert count >= previous[algorithm]
            previous[algorithm] = count


def test_grey_vs_rgb_is_promoted():
    result = compare_images(solid(4, 4, (128,)), solid(4, 4, (128, 128, 128)), 0.95)
    assert result.first.bands >= 3 and result.second.bands >= 3
    assert result[Algorithm.EXACT].stats.changed_count == 0


def test_different_sizes_are_normalized():
    result = compare_images(solid(8, 6, (0, 0, 0)), solid(4, 2, (0, 0, 0)), 0.95)
    assert (result.second.width, result.second.height) == (8, 6)
    assert result.image_size == "8×6"
    assert result[Algorithm.EXACT].diff_image.pixels.shape == (6, 8, 3)


def test_threshold_is_checked_before_the_images():
    five_bands = Image(np.zeros((2, 2, 5), dtype=np.uint8))
    with pytest.raises(InvalidThresholdError):
        compare_images(five_bands, five_bands, 2.0)
    with pytest.raises(UnsupportedBandCountError):
        compare_images(five_bands, five_bands, 0.5)


def test_cancelled_comparison_raises(noisy_pair):
    event = threading.Event()
    event.set()
    with pytest.raises(ComparisonCancelledError):
        compare_images(*noisy_pair, 0.95, cancel_event=event)


def test_expired_deadline_raises_timeout(noisy_pair, monkeypatch):
    clock = itertools.chain([0.0], itertools.repeat(100.0))
    monkeypatch.setattr(cancellation.time, "monotonic", lambda: next(clock))
    with pytest.raises(ComparisonTimeoutError) as excinfo:
        compare_images(*noisy_pair, 0.95, timeout=5)
    assert isinstance(excinfo.value, TimeoutError)
    assert isinstance(excinfo.value, ComparisonCancelledError)


def test_cancel_inside_ssim_scorer_aborts_parallel_run(noisy_pair):
    event = threading.Event()

    class CancellingSSIM:
        def score(self, first, second, ignore_luminance=False, checkpoint=None):
            event.set()
            checkpoint()

    with pytest.raises(ComparisonCancelledError):
        compare_images(*noisy_pair, 0.95, parallel=True, cancel_event=event, ssim_service=CancellingSSIM())


def test_deadline_rejects_non_positive_timeout():
    with pytest.raises(ValueError):
        cancellation.Deadline(timeout=0)
