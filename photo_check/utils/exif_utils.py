"""Capture metadata extraction from EXIF."""

import logging
from typing import Optional

from PIL import Image

from ..core.types import CaptureMetadata
from .time_utils import normalize_exif_datetime

logger = logging.getLogger(__name__)

TAG_MAKE = 271
TAG_MODEL = 272
TAG_DATETIME = 306
TAG_EXIF_IFD = 0x8769
TAG_DATETIME_ORIGINAL = 36867
TAG_DATETIME_DIGITIZED = 36868


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip("\x00 ").strip()
    return text or None


def read_capture_metadata(img: Image.Image) -> Optional[CaptureMetadata]:
    """
    Read make, model and capture time from an open image.

    Missing or unreadable EXIF is not an error: returns None when
    nothing usable is present.
    """
    try:
        exif = img.getexif()
        exif_ifd = exif.get_ifd(TAG_EXIF_IFD)
    except Exception as e:
        logger.debug(f"EXIF unavailable: {e}")
        return None

    make = _clean(exif.get(TAG_MAKE))
    model = _clean(exif.get(TAG_MODEL))
    date_time = (
        _clean(exif_ifd.get(TAG_DATETIME_ORIGINAL))
        or _clean(exif_ifd.get(TAG_DATETIME_DIGITIZED))
        or _clean(exif.get(TAG_DATETIME))
    )
    if date_time:
        date_time = normalize_exif_datetime(date_time)

    if not (make or model or date_time):
        return None
    return CaptureMetadata(make=make, model=model, date_time=date_time)
