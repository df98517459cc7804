"""
Pytest Configuration and Shared Fixtures

Synthetic images are built with numpy and written with Pillow so the
tests need no sample files on disk.
"""

import numpy as np
import pytest
from PIL import Image

from photo_check.core.config import Config
from photo_check.core.types import ExposureStats, ImageRecord, PixelBuffer


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PHOTO_CHECK_* variables from the developer's shell out of the tests."""
    for name in (
        "PHOTO_CHECK_INPUT_DIR",
        "PHOTO_CHECK_OUTPUT_DIR",
        "PHOTO_CHECK_PARALLEL",
        "PHOTO_CHECK_MAX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config(tmp_path):
    """Default configuration writing into a temporary output directory."""
    cfg = Config()
    cfg.output_dir = str(tmp_path / "output")
    return cfg


@pytest.fixture
def make_buffer():
    """Factory for solid-colour pixel buffers."""

    def _make(width, height, value=(128, 128, 128), channels=3):
        color = tuple(value)[:channels]
        if len(color) < channels:
            color = color + (255,) * (channels - len(color))
        pixels = np.empty((height, width, channels), dtype=np.uint8)
        pixels[...] = color
        return PixelBuffer.from_array(pixels)

    return _make


@pytest.fixture
def noise_array():
    """Factory for seeded uniform RGB noise."""

    def _make(width, height, seed=0):
        rng = np.random.default_rng(seed)
        return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)

    return _make


@pytest.fixture
def write_image(tmp_path):
    """Write an RGB array to ``tmp_path`` and return the file path as a string."""

    def _write(name, array, directory=None, **save_kwargs):
        target = (directory or tmp_path) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(np.asarray(array, dtype=np.uint8)).save(target, **save_kwargs)
        return str(target)

    return _write


@pytest.fixture
def make_record():
    """Factory for analysis records with sensible defaults."""

    def _make(name="photo.jpg", hash_hex="0000000000000000", **overrides):
        fields = dict(
            name=name,
            size_bytes=1024,
            width=1920,
            height=1080,
            aspect_ratio=1920 / 1080,
            megapixels=1920 * 1080 / 1_000_000,
            blur_variance=500.0,
            blur_score=80.0,
            exposure=ExposureStats(over_exposed_fraction=0.01, under_exposed_fraction=0.02),
            hash_hex=hash_hex,
        )
        fields.update(overrides)
        return ImageRecord(**fields)

    return _make
