import numpy as np

from ..errors import UnsupportedBandCountError

# Opaque wherever an alpha band exists.
HIGHLIGHT_PALETTE = {
    1: (255,),               # white
    2: (255, 255),           # white, opaque
    3: (255, 0, 255),        # magenta
    4: (255, 0, 255, 255),   # magenta, opaque
}


def highlight_color(bands: int) -> np.ndarray:
    """Return the highlight pixel shaped for an image with *bands* channels."""
    try:
        return np.array(HIGHLIGHT_PALETTE[bands], dtype=np.uint8)
    except KeyError:
        raise UnsupportedBandCountError(f"No highlight colour for {bands} bands") from None
