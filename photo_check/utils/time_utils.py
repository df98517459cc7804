"""Time utility functions."""

from datetime import datetime
from typing import Optional

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def parse_exif_datetime(value: str) -> Optional[datetime]:
    """Parse an EXIF ``YYYY:MM:DD HH:MM:SS`` timestamp."""
    try:
        return datetime.strptime(value.strip(), EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def normalize_exif_datetime(value: str) -> str:
    """ISO-8601 form of an EXIF timestamp, or the raw text when it does not parse."""
    parsed = parse_exif_datetime(value)
    return parsed.isoformat() if parsed else value.strip()


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{seconds/60:.1f}m"
    else:
        return f"{seconds/3600:.1f}h"
