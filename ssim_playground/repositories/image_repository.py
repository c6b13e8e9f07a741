from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..errors import ImageDecodeError
from ..models.image import Image

# Modes the comparison engine understands directly: grey, grey+alpha, RGB, RGBA.
NATIVE_MODES = {"L", "LA", "RGB", "RGBA"}
GREY_MODES = {"1", "I", "I;16", "I;16B", "I;16L", "F"}


class ImageRepository:
    """
    Handles decoding uploads/files into Image entities and encoding results to PNG.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    @staticmethod
    def _to_native_mode(pil_image: PILImage.Image) -> PILImage.Image:
        mode = pil_image.mode
        if mode in NATIVE_MODES:
            return pil_image
        if mode in GREY_MODES:
            if mode == "I" or mode.startswith("I;16"):
                # 16-bit grey (older Pillow opens it as "I"): keep the high byte.
                arr = np.clip(np.asarray(pil_image, dtype=np.int64), 0, 0xFFFF) >> 8
                return PILImage.fromarray(arr.astype(np.uint8))
            return pil_image.convert("L")
        if mode in ("P", "PA"):
            has_alpha = mode == "PA" or "transparency" in pil_image.info
            return pil_image.convert("RGBA" if has_alpha else "RGB")
        return pil_image.convert("RGB")

    def decode(self, source: Union[bytes, BinaryIO], path: Union[str, Path] = None) -> Image:
        """Decode raw bytes or a binary stream. Multi-frame files yield their first frame."""
        stream = BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
        try:
            with PILImage.open(stream) as pil_image:
                pil_image.load()
                pil_image = self._to_native_mode(pil_image)
                pixels = np.array(pil_image, dtype=np.uint8)
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError) as err:
            raise ImageDecodeError(f"Could not decode image{f' {path}' if path else ''}: {err}") from err
        return self.create_image(pixels, path)

    def load(self, path: Union[str, Path]) -> Image:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        with path.open("rb") as fh:
            return self.decode(fh, path)

    @staticmethod
    def to_pil_image(image: Image) -> PILImage.Image:
        """
        Convert Image.pixels → PIL Image object.
        Single-band images are squeezed so Pillow picks mode "L".
        """
        pixels = image.pixels
        if image.bands == 1:
            pixels = pixels[:, :, 0]
        return PILImage.fromarray(np.ascontiguousarray(pixels))

    def encode_png(self, image: Image) -> bytes:
        buffer = BytesIO()
        self.to_pil_image(image).save(buffer, format="PNG")
        return buffer.getvalue()

    def to_data_url(self, image: Image) -> str:
        """PNG-encode and wrap as a data URL for JSON responses."""
        encoded = base64.b64encode(self.encode_png(image)).decode("utf-8")
        return f"data:image/png;base64,{encoded}"

    def save(self, image: Image, path: Union[str, Path] = None) -> Path:
        path = Path(path or image.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.encode_png(image))
        return path
