"""Configuration management for Photo Check."""

import os
from dataclasses import dataclass, field


@dataclass
class ThresholdConfig:
    """Flag thresholds. Defaults are calibration constants; keep them exact."""

    blur_score: float = 35.0  # blurScore below this is blurry
    min_short_side: int = 800  # px, shorter side below this is low-resolution
    min_megapixels: float = 1.0
    overexposed_fraction: float = 0.25  # strictly greater than is overexposed
    underexposed_fraction: float = 0.25
    duplicate_distance: int = 5  # Hamming distance out of 64 bits


@dataclass
class ProcessingConfig:
    """Processing configuration."""

    analysis_max_dimension: int = 512  # longer side cap for sharpness/exposure
    respect_exif_orientation: bool = True
    extract_metadata: bool = True

    # Performance settings
    use_parallel_processing: bool = False
    max_worker_threads: int = 4
    duplicate_index_min_batch: int = 64  # switch from pairwise scan to bucketed index


@dataclass
class Config:
    """Main configuration class."""

    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    # Directories
    input_dir: str = "photos"
    output_dir: str = "output"
    report_name: str = "photo_check.csv"

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        config = cls()

        # Override with environment variables if present
        if os.getenv("PHOTO_CHECK_INPUT_DIR"):
            config.input_dir = os.getenv("PHOTO_CHECK_INPUT_DIR")
        if os.getenv("PHOTO_CHECK_OUTPUT_DIR"):
            config.output_dir = os.getenv("PHOTO_CHECK_OUTPUT_DIR")
        if os.getenv("PHOTO_CHECK_PARALLEL"):
            config.processing.use_parallel_processing = os.getenv(
                "PHOTO_CHECK_PARALLEL"
            ).lower() in ("1", "true", "yes", "on")
        if os.getenv("PHOTO_CHECK_MAX_WORKERS"):
            config.processing.max_worker_threads = int(os.getenv("PHOTO_CHECK_MAX_WORKERS"))

        return config

    @property
    def report_path(self) -> str:
        return os.path.join(self.output_dir, self.report_name)

    def create_directories(self):
        """Create necessary directories."""
        os.makedirs(self.output_dir, exist_ok=True)
