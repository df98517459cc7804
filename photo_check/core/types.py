"""Data types shared by the analysis pipeline."""

from dataclasses import asdict, dataclass, field, replace
from typing import Dict, Optional, Tuple
import uuid

import numpy as np

from .errors import DegenerateInputError


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Read-only view of ``height x width`` RGB(A) samples in [0, 255]."""

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] not in (3, 4):
            raise DegenerateInputError(
                f"Pixel buffer must have shape (height, width, 3|4), got {self.pixels.shape}"
            )

    @classmethod
    def from_array(cls, array) -> "PixelBuffer":
        view = np.asarray(array).view()
        view.flags.writeable = False
        return cls(view)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class ExposureStats:
    """Fractions of pixels in the near-white and near-black histogram tails."""

    over_exposed_fraction: float
    under_exposed_fraction: float


@dataclass(frozen=True)
class CaptureMetadata:
    """Optional capture metadata; any field may be missing."""

    make: Optional[str] = None
    model: Optional[str] = None
    date_time: Optional[str] = None


@dataclass(frozen=True, eq=False)
class DecodedImage:
    """Everything the core needs from the image decoding collaborator."""

    name: str
    size_bytes: int
    width: int
    height: int
    analysis: PixelBuffer  # longer side capped for sharpness and exposure
    hash_grid: PixelBuffer  # exactly 9 wide, 8 high
    metadata: Optional[CaptureMetadata] = None


@dataclass(frozen=True)
class ImageRecord:
    """Per-image analysis result."""

    name: str
    size_bytes: int
    width: int
    height: int
    aspect_ratio: float
    megapixels: float
    blur_variance: float
    blur_score: float  # 0..100, higher is sharper
    exposure: ExposureStats
    hash_hex: str
    flags: Tuple[str, ...] = ()
    metadata: Optional[CaptureMetadata] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def with_flag(self, flag: str) -> "ImageRecord":
        """Return a record carrying ``flag``; unchanged if already present."""
        if flag in self.flags:
            return self
        return replace(self, flags=self.flags + (flag,))

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["flags"] = list(self.flags)
        return data
