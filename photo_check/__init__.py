"""Photo Check - batch photo quality triage."""

__version__ = "1.0.0"
__author__ = "Photo Check Team"

from .core.config import Config
from .core.photo_processor import PhotoProcessor
from .core.types import CaptureMetadata, DecodedImage, ExposureStats, ImageRecord, PixelBuffer
from .processors.quality.sharpness import SharpnessAnalyzer
from .processors.quality.duplicates import DuplicateDetector

__all__ = [
    "Config",
    "PhotoProcessor",
    "SharpnessAnalyzer",
    "DuplicateDetector",
    "CaptureMetadata",
    "DecodedImage",
    "ExposureStats",
    "ImageRecord",
    "PixelBuffer",
]
