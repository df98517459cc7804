"""Utility modules."""

from .image_utils import decode_bytes, decode_image, get_image_paths
from .exif_utils import read_capture_metadata
from .time_utils import format_duration

__all__ = [
    "decode_bytes",
    "decode_image",
    "get_image_paths",
    "read_capture_metadata",
    "format_duration",
]
