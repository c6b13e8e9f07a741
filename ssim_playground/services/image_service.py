from __future__ import annotations

import logging
from typing import Tuple

import cv2
import numpy as np

from ..errors import DimensionMismatchError, UnsupportedBandCountError
from ..models.image import Image

logger = logging.getLogger(__name__)

SUPPORTED_BANDS = (1, 2, 3, 4)
OPAQUE = 255
REC709_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])

_levels = np.arange(256) / 255.0
# uint8 sRGB sample -> linear light in [0, 1].
SRGB_TO_LINEAR = np.where(_levels <= 0.04045, _levels / 12.92, ((_levels + 0.055) / 1.055) ** 2.4)


def _as_hwc(pixels: np.ndarray) -> np.ndarray:
    # OpenCV drops the trailing axis of single-channel arrays.
    if pixels.ndim == 2:
        return pixels[:, :, np.newaxis]
    return pixels


class ImageService:
    """
    Makes two images comparable: same width, height and band count.
    Also owns the band conversions the scorers need.
    No I/O here, works only with Image objects.
    """

    # ─── Validation ────────────────────────────────────────────────
    @staticmethod
    def validate(img: Image) -> None:
        if img.width == 0 or img.height == 0:
            raise DimensionMismatchError(
                f"Cannot compare an empty image ({img.width}x{img.height})"
            )
        if img.bands not in SUPPORTED_BANDS:
            raise UnsupportedBandCountError(
                f"Unsupported band count {img.bands}; expected one of {SUPPORTED_BANDS}"
            )

    # ─── Public API ────────────────────────────────────────────────
    def normalize_pair(self, first: Image, second: Image) -> Tuple[Image, Image]:
        """
        Return (first, second) with identical width, height and band count.

        The first image is the reference: the second one is scaled to its width,
        then cropped or padded at the bottom to its height. Band counts are only
        touched when they differ. A matching pair is returned unchanged.
        """
        self.validate(first)
        self.validate(second)

        if (first.width, first.height) != (second.width, second.height):
            second = self.match_size(second, first.width, first.height)

        if first.bands != second.bands:
            first, second = self.reconcile_bands(first, second)

        return first, second

    def match_size(self, img: Image, width: int, height: int) -> Image:
        """Scale *img* to *width* (aspect preserved), then crop/pad to *height*."""
        scale = width / img.width
        scaled_height = max(1, int(round(img.height * scale)))
        interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LANCZOS4

        resized = _as_hwc(cv2.resize(
            img.pixels.copy(),
            (width, scaled_height),
            interpolation=interpolation,
        ))
        logger.debug(
            f"Scaled second image {img.width}x{img.height} -> {width}x{scaled_height} (x{scale:.4f})"
        )

        if scaled_height > height:
            # Keep the top-left region, drop the excess rows at the bottom.
            resized = resized[:height]
        elif scaled_height < height:
            # Anchor at the top, replicate the last row into the missing area.
            resized = _as_hwc(cv2.copyMakeBorder(
                resized, 0, height - scaled_height, 0, 0, cv2.BORDER_REPLICATE
            ))

        return Image(pixels=np.ascontiguousarray(resized), path=img.path)

    def reconcile_bands(self, first: Image, second: Image) -> Tuple[Image, Image]:
        """Promote grey to RGB, then add an opaque alpha where only one side has it."""
        if first.bands < 3:
            first = self.promote_to_color(first)
        if second.bands < 3:
            second = self.promote_to_color(second)

        if first.bands == 4 and second.bands == 3:
            second = self.add_alpha(second)
        elif first.bands == 3 and second.bands == 4:
            first = self.add_alpha(first)

        logger.debug(f"Reconciled bands to {first.bands}/{second.bands}")
        return first, second

    @staticmethod
    def promote_to_color(img: Image) -> Image:
        """Grey -> RGB, grey+alpha -> RGBA (alpha kept)."""
        if img.bands >= 3:
            return img
        grey = img.pixels[:, :, :1]
        planes = [grey, grey, grey]
        if img.bands == 2:
            planes.append(img.pixels[:, :, 1:2])
        return Image(pixels=np.concatenate(planes, axis=2), path=img.path)

    @staticmethod
    def add_alpha(img: Image) -> Image:
        alpha = np.full((img.height, img.width, 1), OPAQUE, dtype=np.uint8)
        return Image(pixels=np.concatenate([img.pixels, alpha], axis=2), path=img.path)

    # ─── Helpers for the scorers ───────────────────────────────────
    @staticmethod
    def to_luminance(img: Image) -> np.ndarray:
        """
        Single-channel uint8 luminance (H, W).
        sRGB is linearised, weighted with Rec.709 coefficients and re-encoded to sRGB.
        Alpha is ignored; grey+alpha uses the grey band as is.
        """
        if img.bands <= 2:
            return np.ascontiguousarray(img.pixels[:, :, 0])
        y = SRGB_TO_LINEAR[img.pixels[:, :, :3]] @ REC709_WEIGHTS
        encoded = np.where(y <= 0.0031308, y * 12.92, 1.055 * np.power(y, 1 / 2.4) - 0.055)
        return np.clip(np.rint(encoded * 255.0), 0, 255).astype(np.uint8)

    @staticmethod
    def to_rgb(img: Image) -> np.ndarray:
        """First three bands as (H, W, 3) uint8; grey is replicated into R, G, B."""
        if img.bands <= 2:
            return np.repeat(img.pixels[:, :, :1], 3, axis=2)
        return img.pixels[:, :, :3]
