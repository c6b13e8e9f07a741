import os
import sys
import json
import logging
import argparse
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..errors import ComparisonError
from ..models.algorithm import Algorithm
from ..pipeline.compare_images import compare_images
from ..repositories.image_repository import ImageRepository

DEFAULT_THRESHOLD = float(os.getenv("DEFAULT_THRESHOLD", "0.95"))
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "comparison_output")

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ssim-compare",
        description="Compare two images with SSIM, RGB colour distance and exact pixel equality.",
    )
    ap.add_argument("first", type=Path, help="reference image")
    ap.add_argument("second", type=Path, help="image compared against the reference")
    ap.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD,
                    help=f"sensitivity in [0, 1] (default {DEFAULT_THRESHOLD})")
    ap.add_argument("--ignore-luminance", action="store_true",
                    help="SSIM compares structure and contrast only")
    ap.add_argument("--output-dir", type=Path, default=Path(OUTPUT_DIR),
                    help=f"where diffs and stats.json go (default {OUTPUT_DIR})")
    ap.add_argument("--timeout", type=float, default=None, help="abort after this many seconds")
    ap.add_argument("--sequential", action="store_true", help="run the scorers one after another")
    return ap


def main(argv=None) -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    args = build_parser().parse_args(argv)
    image_repository = ImageRepository()

    try:
        first = image_repository.load(args.first)
        second = image_repository.load(args.second)
        result = compare_images(
            first, second, args.threshold,
            ignore_luminance=args.ignore_luminance,
            parallel=not args.sequential,
            timeout=args.timeout,
        )
    except (ComparisonError, FileNotFoundError) as err:
        logger.error(f"Comparison failed: {err}")
        return 2

    out_dir = args.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    for algorithm in Algorithm:
        image_repository.save(result[algorithm].diff_image, out_dir / f"{algorithm.value}_diff.png")
    image_repository.save(result.first, out_dir / "img1.png")
    image_repository.save(result.second, out_dir / "img2.png")

    stats = result.stats_dict()
    (out_dir / "stats.json").write_text(json.dumps(stats, indent=2, ensure_ascii=False), encoding="utf-8")

    print(f"Compared {args.first.name} with {args.second.name} at {result.image_size} "
          f"(threshold {result.threshold})")
    for algorithm in Algorithm:
        s = result[algorithm].stats
        print(f"{algorithm.value:>8}: {s.changed_count:8d} changed ({s.changed_percent:6.2f}%) | "
              f"min {s.min:.4f} | max {s.max:.4f} | avg {s.mean:.4f}")
    print(f"Results written to {out_dir}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())
