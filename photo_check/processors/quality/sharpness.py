"""Sharpness analysis and blur detection via Laplacian variance."""

import logging
import math
from typing import Tuple

import numpy as np

from ...core.types import PixelBuffer
from .luma import to_luma

logger = logging.getLogger(__name__)

LAPLACIAN_KERNEL = np.array([[0, 1, 0], [1, -4, 1], [0, 1, 0]], dtype=np.float64)

# Score calibration: log10(variance + 1) / 3 * 100, clamped to [0, 100]
SCORE_LOG_DIVISOR = 3.0
SCORE_SCALE = 100.0


def laplacian_response(gray: np.ndarray) -> np.ndarray:
    """
    Convolve ``gray`` with the 4-neighbour Laplacian over interior pixels.

    Returns an array of shape ``(height - 2, width - 2)``; the 1-pixel
    border has no response and is not part of the result. Buffers smaller
    than 3x3 yield an empty array.
    """
    height, width = gray.shape
    if height < 3 or width < 3:
        return np.empty((0, 0), dtype=np.float64)

    gray = gray.astype(np.float64, copy=False)
    center = gray[1:-1, 1:-1]
    return (
        gray[:-2, 1:-1]  # up
        + gray[2:, 1:-1]  # down
        + gray[1:-1, :-2]  # left
        + gray[1:-1, 2:]  # right
        - 4.0 * center
    )


def laplacian_variance(gray: np.ndarray) -> float:
    """Population variance of the interior Laplacian response, 0 when degenerate."""
    response = laplacian_response(gray)
    if response.size == 0:
        return 0.0
    return float(np.var(response))


def blur_score(variance: float) -> float:
    """Map a Laplacian variance onto [0, 100], higher is sharper."""
    score = (math.log10(variance + 1.0) / SCORE_LOG_DIVISOR) * SCORE_SCALE
    return max(0.0, min(100.0, score))


class SharpnessAnalyzer:
    """Sharpness estimation on a resolution-capped analysis buffer."""

    def __init__(self, config):
        self.config = config

    def analyze_luma(self, gray: np.ndarray) -> Tuple[float, float]:
        """Return ``(variance, score)`` for a luma array."""
        variance = laplacian_variance(gray)
        return variance, blur_score(variance)

    def analyze(self, buffer: PixelBuffer) -> Tuple[float, float]:
        """Return ``(variance, score)`` for an RGB(A) analysis buffer."""
        max_dim = self.config.processing.analysis_max_dimension
        if max(buffer.width, buffer.height) > max_dim:
            logger.warning(
                f"Analysis buffer {buffer.width}x{buffer.height} exceeds the "
                f"{max_dim}px cap; scores will not be comparable across images"
            )
        variance, score = self.analyze_luma(to_luma(buffer))
        logger.debug(f"Laplacian variance {variance:.2f}, blur score {score:.1f}")
        return variance, score
