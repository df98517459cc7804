"""Quality assessment processors."""

from .sharpness import SharpnessAnalyzer
from .duplicates import DuplicateDetector
from .flags import FlagClassifier

__all__ = ["SharpnessAnalyzer", "DuplicateDetector", "FlagClassifier"]
