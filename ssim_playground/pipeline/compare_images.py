"""
Comparison pipeline
Normalizes two images, runs the three scorers and derives a mask, a
composited diff and statistics from each map.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict

from dotenv import load_dotenv

from ..models.algorithm import Algorithm
from ..models.comparison_result import AlgorithmResult, ComparisonResult
from ..models.image import Image
from ..models.scalar_map import ScalarMap
from ..services.change_mask_service import build_change_mask, validate_threshold
from ..services.color_distance_service import ColorDistanceService
from ..services.compositor_service import composite_diff
from ..services.exact_diff_service import ExactDiffService
from ..services.image_service import ImageService
from ..services.ssim_service import BLUR_RADIUS, C1, C2, SSIMService
from ..services.statistics_service import summarize
from .cancellation import Deadline

# Load environment variables
load_dotenv()

COMPARE_PARALLEL = os.getenv("COMPARE_PARALLEL", "1").lower() not in ("0", "false", "no")

logger = logging.getLogger(__name__)


def _scorers(
    ignore_luminance: bool,
    deadline: Deadline,
    ssim_service: SSIMService,
    color_distance_service: ColorDistanceService,
    exact_diff_service: ExactDiffService,
) -> Dict[Algorithm, Callable[[Image, Image], ScalarMap]]:
    return {
        Algorithm.SSIM: lambda a, b: ssim_service.score(
            a, b, ignore_luminance=ignore_luminance, checkpoint=deadline
        ),
        Algorithm.COLOR_DISTANCE: color_distance_service.score,
        Algorithm.EXACT: exact_diff_service.score,
    }


def compare_images(
    first: Image,
    second: Image,
    threshold: float,
    ignore_luminance: bool = False,
    *,
    parallel: bool | None = None,
    cancel_event: threading.Event | None = None,
    timeout: float | None = None,
    image_service: ImageService | None = None,
    ssim_service: SSIMService | None = None,
    color_distance_service: ColorDistanceService | None = None,
    exact_diff_service: ExactDiffService | None = None,
) -> ComparisonResult:
    """
    Compare *second* against the reference *first*.

    Steps:
        • validate the threshold (before any pixel work)
        • normalize the pair to the same size and band count
        • score with SSIM, RGB colour distance and exact equality
        • per algorithm: threshold into a mask, paint the diff, summarize

    Args:
        first: Reference image, its size and layout win during normalization
        second: Image compared against the reference
        threshold: Sensitivity in [0, 1]
        ignore_luminance: SSIM compares structure and contrast only
        parallel: Run the scorers in a thread pool (default COMPARE_PARALLEL)
        cancel_event: Set it from another thread to abort the comparison
        timeout: Seconds before the comparison aborts with ComparisonTimeoutError

    Returns:
        ComparisonResult holding the normalized pair and one AlgorithmResult
        per algorithm. Partial results are never returned.
    """
    threshold = validate_threshold(threshold)
    deadline = Deadline(timeout=timeout, cancel_event=cancel_event)
    parallel = COMPARE_PARALLEL if parallel is None else parallel

    image_service = image_service or ImageService()
    ssim_service = ssim_service or SSIMService()
    color_distance_service = color_distance_service or ColorDistanceService()
    exact_diff_service = exact_diff_service or ExactDiffService()

    deadline.check()
    logger.info(
        f"Comparing {first.width}x{first.height}/{first.bands} bands "
        f"with {second.width}x{second.height}/{second.bands} bands "
        f"(threshold={threshold}, ignore_luminance={ignore_luminance})"
    )
    first, second = image_service.normalize_pair(first, second)
    deadline.check()

    scorers = _scorers(
        ignore_luminance, deadline, ssim_service, color_distance_service, exact_diff_service
    )
    scalar_maps = _run_scorers(scorers, first, second, parallel)
    deadline.check()

    results: Dict[Algorithm, AlgorithmResult] = {}
    for algorithm, scalar_map in scalar_maps.items():
        change_mask = build_change_mask(scalar_map, threshold)
        diff_image = composite_diff(first, change_mask)
        stats = summarize(scalar_map, change_mask)
        results[algorithm] = AlgorithmResult(
            scalar_map=scalar_map,
            change_mask=change_mask,
            diff_image=diff_image,
            stats=stats,
        )
        logger.info(
            f"{algorithm.value}: {stats.changed_count} changed pixels "
            f"({stats.changed_percent}%), min={stats.min} max={stats.max} avg={stats.mean}"
        )
        deadline.check()

    return ComparisonResult(
        first=first,
        second=second,
        threshold=threshold,
        ignore_luminance=ignore_luminance,
        blur_radius=BLUR_RADIUS,
        c1=C1,
        c2=C2,
        results=results,
    )


def _run_scorers(
    scorers: Dict[Algorithm, Callable[[Image, Image], ScalarMap]],
    first: Image,
    second: Image,
    parallel: bool,
) -> Dict[Algorithm, ScalarMap]:
    if not parallel:
        return {algorithm: score(first, second) for algorithm, score in scorers.items()}

    with ThreadPoolExecutor(max_workers=len(scorers), thread_name_prefix="scorer") as pool:
        futures = {algorithm: pool.submit(score, first, second) for algorithm, score in scorers.items()}
        # result() re-raises the first scorer failure (cancellation included).
        return {algorithm: future.result() for algorithm, future in futures.items()}
