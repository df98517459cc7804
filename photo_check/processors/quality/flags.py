"""Rule-based quality flags for a single image."""

from typing import Tuple

from ...core.types import ExposureStats

BLURRY = "blurry"
LOW_RESOLUTION = "low-resolution"
OVEREXPOSED = "overexposed"
UNDEREXPOSED = "underexposed"
DUPLICATE = "duplicate"

ALL_FLAGS = (BLURRY, LOW_RESOLUTION, OVEREXPOSED, UNDEREXPOSED, DUPLICATE)


class FlagClassifier:
    """Turn per-image measurements into categorical labels."""

    def __init__(self, config):
        self.thresholds = config.thresholds

    def classify(
        self,
        blur_score: float,
        width: int,
        height: int,
        megapixels: float,
        exposure: ExposureStats,
    ) -> Tuple[str, ...]:
        t = self.thresholds
        flags = []
        if blur_score < t.blur_score:
            flags.append(BLURRY)
        if min(width, height) < t.min_short_side or megapixels < t.min_megapixels:
            flags.append(LOW_RESOLUTION)
        if exposure.over_exposed_fraction > t.overexposed_fraction:
            flags.append(OVEREXPOSED)
        if exposure.under_exposed_fraction > t.underexposed_fraction:
            flags.append(UNDEREXPOSED)
        return tuple(flags)
