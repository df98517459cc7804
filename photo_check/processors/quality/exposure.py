"""Exposure analysis from a 256-bin luma histogram."""

import logging

import numpy as np

from ...core.errors import DegenerateInputError
from ...core.types import ExposureStats, PixelBuffer
from .luma import to_luma

logger = logging.getLogger(__name__)

UNDEREXPOSED_MAX_BIN = 5  # bins 0..5 are near-black
OVEREXPOSED_MIN_BIN = 250  # bins 250..255 are near-white


def luma_histogram(buffer: PixelBuffer) -> np.ndarray:
    """256-bin histogram of luma rounded half-up to integers."""
    luma = to_luma(buffer)
    levels = np.clip(np.floor(luma + 0.5), 0, 255).astype(np.intp)
    return np.bincount(levels.ravel(), minlength=256)


def analyze_exposure(buffer: PixelBuffer) -> ExposureStats:
    """Fractions of pixels in the near-black and near-white tails."""
    total = buffer.size
    if total == 0:
        raise DegenerateInputError("Cannot analyze exposure of an empty pixel buffer")

    hist = luma_histogram(buffer)
    under = int(hist[: UNDEREXPOSED_MAX_BIN + 1].sum())
    over = int(hist[OVEREXPOSED_MIN_BIN:].sum())

    stats = ExposureStats(over_exposed_fraction=over / total, under_exposed_fraction=under / total)
    logger.debug(
        f"Exposure: {stats.over_exposed_fraction:.3f} over, "
        f"{stats.under_exposed_fraction:.3f} under"
    )
    return stats
