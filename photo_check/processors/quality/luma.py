"""Luma (perceived brightness) transform, ITU-R BT.601 weights."""

import numpy as np

from ...core.types import PixelBuffer

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def to_luma(buffer: PixelBuffer) -> np.ndarray:
    """Return a ``height x width`` float64 brightness array, unrounded.

    Any alpha channel is ignored.
    """
    rgb = buffer.pixels[..., :3].astype(np.float64)
    return rgb @ LUMA_WEIGHTS
