"""Duplicate photo detection using difference hashing."""

import logging
import string
from collections import defaultdict
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np

from ...core.errors import DegenerateInputError
from ...core.types import ImageRecord, PixelBuffer
from .flags import DUPLICATE
from .luma import to_luma

logger = logging.getLogger(__name__)

HASH_GRID_WIDTH = 9
HASH_GRID_HEIGHT = 8
HASH_BITS = (HASH_GRID_WIDTH - 1) * HASH_GRID_HEIGHT
HASH_HEX_LENGTH = HASH_BITS // 4


def dhash_bits(gray: np.ndarray) -> np.ndarray:
    """64 comparison bits, row-major: 1 where a pixel is brighter than its right neighbour."""
    if gray.shape != (HASH_GRID_HEIGHT, HASH_GRID_WIDTH):
        raise DegenerateInputError(
            f"Difference hash needs a {HASH_GRID_WIDTH}x{HASH_GRID_HEIGHT} grid, "
            f"got {gray.shape[1]}x{gray.shape[0]}"
        )
    return (gray[:, :-1] > gray[:, 1:]).ravel()


def bits_to_hex(bits: Sequence[bool]) -> str:
    """Pack bits into lowercase hex, most significant bit first in each nibble."""
    digits = []
    for i in range(0, len(bits), 4):
        nibble = 0
        for bit in bits[i : i + 4]:
            nibble = (nibble << 1) | int(bit)
        digits.append(format(nibble, "x"))
    return "".join(digits)


def compute_dhash(grid: PixelBuffer) -> str:
    """16-character hex difference hash of a 9x8 RGB(A) grid."""
    return bits_to_hex(dhash_bits(to_luma(grid)))


def _parse_hex(fingerprint: str) -> int:
    if not fingerprint or any(c not in string.hexdigits for c in fingerprint):
        raise DegenerateInputError(f"Fingerprint is not hexadecimal: {fingerprint!r}")
    return int(fingerprint, 16)


def hamming_distance(a: str, b: str) -> int:
    """Number of differing bits between two equal-length hex fingerprints."""
    if len(a) != len(b):
        raise DegenerateInputError(
            f"Cannot compare fingerprints of different lengths ({len(a)} and {len(b)})"
        )
    return bin(_parse_hex(a) ^ _parse_hex(b)).count("1")


def _segment_bounds(threshold: int) -> List[Tuple[int, int]]:
    """Split the hash into threshold + 1 bit ranges (pigeonhole)."""
    segments = threshold + 1
    edges = [k * HASH_BITS // segments for k in range(segments + 1)]
    return [(edges[k], edges[k + 1]) for k in range(segments)]


def _segment_keys(value: int, bounds: List[Tuple[int, int]]) -> Iterator[Tuple[int, int]]:
    for index, (start, stop) in enumerate(bounds):
        width = stop - start
        shift = HASH_BITS - stop
        yield index, (value >> shift) & ((1 << width) - 1)


def find_duplicate_indices_pairwise(hashes: Sequence[str], threshold: int) -> List[int]:
    """Indices j having some earlier i with distance <= threshold."""
    marked = []
    for j in range(1, len(hashes)):
        if any(hamming_distance(hashes[i], hashes[j]) <= threshold for i in range(j)):
            marked.append(j)
    return marked


def find_duplicate_indices_bucketed(hashes: Sequence[str], threshold: int) -> List[int]:
    """
    Same result as :func:`find_duplicate_indices_pairwise`, using a bucket index.

    Two 64-bit hashes within ``threshold`` bits of each other must agree
    exactly on at least one of ``threshold + 1`` disjoint bit segments, so
    only hashes sharing a segment value are compared.
    """
    if threshold < 0:
        return []
    if threshold >= HASH_BITS:
        return list(range(1, len(hashes)))
    if any(len(h) != HASH_HEX_LENGTH for h in hashes):
        return find_duplicate_indices_pairwise(hashes, threshold)

    bounds = _segment_bounds(threshold)
    buckets: Dict[Tuple[int, int], List[int]] = defaultdict(list)
    values = [_parse_hex(h) for h in hashes]
    marked = []

    for j, value in enumerate(values):
        keys = list(_segment_keys(value, bounds))
        candidates = set()
        for key in keys:
            candidates.update(buckets.get(key, ()))
        if any(bin(values[i] ^ value).count("1") <= threshold for i in candidates):
            marked.append(j)
        for key in keys:
            buckets[key].append(j)

    return marked


class DuplicateDetector:
    """Cross-image duplicate pass over completed per-image records."""

    def __init__(self, config):
        self.config = config
        self.threshold = config.thresholds.duplicate_distance

    def find_duplicate_indices(self, hashes: Sequence[str]) -> List[int]:
        if len(hashes) >= self.config.processing.duplicate_index_min_batch:
            return find_duplicate_indices_bucketed(hashes, self.threshold)
        return find_duplicate_indices_pairwise(hashes, self.threshold)

    def mark_duplicates(self, records: Sequence[ImageRecord]) -> List[ImageRecord]:
        """
        Return a new record list with later near-duplicates flagged.

        For every pair ``i < j`` within the distance threshold, record ``j``
        gets the ``duplicate`` flag. The earlier record is never flagged.
        """
        hashes = [record.hash_hex for record in records]
        marked = set(self.find_duplicate_indices(hashes))
        for j in sorted(marked):
            logger.debug(f"{records[j].name} is a near-duplicate of an earlier image")
        return [
            record.with_flag(DUPLICATE) if index in marked else record
            for index, record in enumerate(records)
        ]
