"""Image decoding and pixel buffer preparation."""

import io
import logging
import math
import os
from contextlib import ExitStack, contextmanager
from typing import Iterator, List, Tuple, Union

import cv2
import numpy as np
from PIL import Image, ImageOps

from ..core.errors import DecodeError
from ..core.types import DecodedImage, PixelBuffer
from ..processors.quality.duplicates import HASH_GRID_HEIGHT, HASH_GRID_WIDTH
from .exif_utils import read_capture_metadata

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".tif", ".gif"]
DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


@contextmanager
def open_image(source: Union[str, io.BytesIO], name: str) -> Iterator[Image.Image]:
    """Open and fully decode an image; the handle is closed on every exit path."""
    try:
        img = Image.open(source)
    except DECODE_ERRORS as e:
        raise DecodeError(name, str(e)) from e

    try:
        img.load()
    except DECODE_ERRORS as e:
        img.close()
        raise DecodeError(name, str(e)) from e

    try:
        yield img
    finally:
        img.close()


def analysis_size(width: int, height: int, max_dim: int) -> Tuple[int, int]:
    """Target size with the longer side capped at ``max_dim``; never upscales."""
    scale = min(1.0, max_dim / max(width, height))
    return (
        max(1, int(math.floor(width * scale + 0.5))),
        max(1, int(math.floor(height * scale + 0.5))),
    )


def _prepare(img: Image.Image, name: str, size_bytes: int, config) -> DecodedImage:
    processing = config.processing
    metadata = read_capture_metadata(img) if processing.extract_metadata else None

    try:
        with ExitStack() as stack:
            oriented = img
            if processing.respect_exif_orientation:
                oriented = ImageOps.exif_transpose(img)
                stack.callback(oriented.close)

            rgb = oriented.convert("RGB")
            stack.callback(rgb.close)

            width, height = rgb.size
            if width == 0 or height == 0:
                raise DecodeError(name, "image has no pixels")

            target = analysis_size(width, height, processing.analysis_max_dimension)
            if target == rgb.size:
                analysis = np.array(rgb)
            else:
                scaled = rgb.resize(target, Image.Resampling.BILINEAR)
                stack.callback(scaled.close)
                analysis = np.array(scaled)

            # Hash grid comes from the full-resolution image, not the analysis buffer
            grid = cv2.resize(
                np.asarray(rgb), (HASH_GRID_WIDTH, HASH_GRID_HEIGHT), interpolation=cv2.INTER_AREA
            )
    except DecodeError:
        raise
    except DECODE_ERRORS as e:
        raise DecodeError(name, str(e)) from e

    logger.debug(f"Decoded {name}: {width}x{height}, analysis {target[0]}x{target[1]}")
    return DecodedImage(
        name=name,
        size_bytes=size_bytes,
        width=width,
        height=height,
        analysis=PixelBuffer.from_array(analysis),
        hash_grid=PixelBuffer.from_array(grid),
        metadata=metadata,
    )


def decode_image(path: str, config) -> DecodedImage:
    """Decode an image file into the buffers the analysis pipeline needs."""
    name = os.path.basename(path)
    try:
        size_bytes = os.path.getsize(path)
    except OSError as e:
        raise DecodeError(name, str(e)) from e

    with open_image(path, name) as img:
        return _prepare(img, name, size_bytes, config)


def decode_bytes(name: str, data: bytes, config) -> DecodedImage:
    """Decode an in-memory image."""
    with open_image(io.BytesIO(data), name) as img:
        return _prepare(img, name, len(data), config)


def get_image_paths(directory: str, extensions: List[str] = None, recursive: bool = False) -> List[str]:
    """Get all image file paths from directory."""
    if extensions is None:
        extensions = IMAGE_EXTENSIONS

    image_paths = []
    if not os.path.isdir(directory):
        return image_paths

    if recursive:
        for root, _, files in os.walk(directory):
            for file in files:
                if any(file.lower().endswith(ext) for ext in extensions):
                    image_paths.append(os.path.join(root, file))
    else:
        for file in os.listdir(directory):
            path = os.path.join(directory, file)
            if os.path.isfile(path) and any(file.lower().endswith(ext) for ext in extensions):
                image_paths.append(path)

    return sorted(image_paths)
