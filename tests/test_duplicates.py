"""Unit tests for difference hashing and duplicate marking."""

import random

import numpy as np
import pytest

from photo_check.core.errors import DegenerateInputError
from photo_check.core.types import PixelBuffer
from photo_check.processors.quality.duplicates import (
    DuplicateDetector,
    bits_to_hex,
    compute_dhash,
    find_duplicate_indices_bucketed,
    find_duplicate_indices_pairwise,
    hamming_distance,
)


def grid_from_rows(rows):
    """9x8 RGB grid whose grey levels are given per row."""
    gray = np.array(rows, dtype=np.uint8)
    return PixelBuffer.from_array(np.repeat(gray[:, :, None], 3, axis=2))


def random_hash(rng):
    return format(rng.getrandbits(64), "016x")


def flip_bits(hash_hex, count, rng):
    value = int(hash_hex, 16)
    for position in rng.sample(range(64), count):
        value ^= 1 << position
    return format(value, "016x")


class TestBitsToHex:
    """Test nibble packing."""

    def test_msb_first(self):
        assert bits_to_hex([1, 0, 0, 0] * 16) == "8" * 16

    def test_lowercase(self):
        assert bits_to_hex([1, 0, 1, 0, 1, 1, 1, 1]) == "af"


class TestComputeDhash:
    """Test the 9x8 difference hash."""

    def test_decreasing_rows_set_every_bit(self):
        rows = [[90 - 10 * x for x in range(9)]] * 8

        assert compute_dhash(grid_from_rows(rows)) == "ffffffffffffffff"

    def test_increasing_rows_clear_every_bit(self):
        rows = [[10 * x for x in range(9)]] * 8

        assert compute_dhash(grid_from_rows(rows)) == "0000000000000000"

    def test_equal_neighbours_are_zero(self):
        """Test the comparison is strictly greater."""
        assert compute_dhash(grid_from_rows([[50] * 9] * 8)) == "0" * 16

    def test_row_major_order(self):
        """Test the first comparison of the first row is the top bit."""
        rows = [[0] * 9 for _ in range(8)]
        rows[0][0] = 10

        assert compute_dhash(grid_from_rows(rows)) == "8000000000000000"

    def test_last_row_is_last_byte(self):
        rows = [[0] * 9 for _ in range(8)]
        rows[7] = [90 - 10 * x for x in range(9)]

        assert compute_dhash(grid_from_rows(rows)) == "00000000000000ff"

    def test_length_is_sixteen(self, noise_array):
        fingerprint = compute_dhash(PixelBuffer.from_array(noise_array(9, 8, seed=2)))

        assert len(fingerprint) == 16
        assert all(c in "0123456789abcdef" for c in fingerprint)

    def test_wrong_grid_size_rejected(self, make_buffer):
        with pytest.raises(DegenerateInputError):
            compute_dhash(make_buffer(8, 8))


class TestHammingDistance:
    """Test bit distance between fingerprints."""

    def test_identical(self):
        assert hamming_distance("0f0f0f0f0f0f0f0f", "0f0f0f0f0f0f0f0f") == 0

    def test_one_bit(self):
        assert hamming_distance("0f0f0f0f0f0f0f0f", "0f0f0f0f0f0f0f0e") == 1

    def test_all_bits(self):
        assert hamming_distance("0000000000000000", "ffffffffffffffff") == 64

    def test_case_insensitive(self):
        assert hamming_distance("ABCDEF0123456789", "abcdef0123456789") == 0

    def test_bounds_on_random_pairs(self):
        rng = random.Random(7)
        for _ in range(100):
            a, b = random_hash(rng), random_hash(rng)
            assert 0 <= hamming_distance(a, b) <= 64
            assert hamming_distance(a, a) == 0
            assert hamming_distance(a, b) == hamming_distance(b, a)

    def test_empty_fingerprints_rejected(self):
        with pytest.raises(DegenerateInputError):
            hamming_distance("", "")

    def test_unequal_lengths_rejected(self):
        with pytest.raises(DegenerateInputError):
            hamming_distance("0f0f0f0f0f0f0f0f", "0f0f")

    @pytest.mark.parametrize("bad", ["0f0f0f0f0f0f0fzz", "0x0f0f0f0f0f0f0f", "0f0f0f0f 0f0f0f0"])
    def test_non_hex_rejected(self, bad):
        with pytest.raises(DegenerateInputError):
            hamming_distance("0f0f0f0f0f0f0f0f", bad)


class TestDuplicateIndices:
    """Test the pairwise scan and the bucketed index agree."""

    def test_later_record_is_marked(self):
        assert find_duplicate_indices_pairwise(["0f0f0f0f0f0f0f0f", "0f0f0f0f0f0f0f0e"], 5) == [1]

    def test_threshold_is_inclusive(self):
        a = "0000000000000000"
        b = "000000000000001f"  # 5 bits
        c = "000000000000003f"  # 6 bits

        assert find_duplicate_indices_pairwise([a, b], 5) == [1]
        assert find_duplicate_indices_pairwise([a, c], 5) == []

    @pytest.mark.parametrize("threshold", [0, 1, 5, 12, 63, 64])
    def test_bucketed_matches_pairwise(self, threshold):
        rng = random.Random(threshold)
        hashes = []
        for _ in range(120):
            if hashes and rng.random() < 0.5:
                hashes.append(flip_bits(rng.choice(hashes), rng.randint(0, 10), rng))
            else:
                hashes.append(random_hash(rng))

        assert find_duplicate_indices_bucketed(hashes, threshold) == (
            find_duplicate_indices_pairwise(hashes, threshold)
        )

    def test_empty_batch(self):
        assert find_duplicate_indices_pairwise([], 5) == []
        assert find_duplicate_indices_bucketed([], 5) == []


class TestDuplicateDetector:
    """Test directional duplicate flagging over records."""

    def test_directional_marking(self, config, make_record):
        """Test only the later record of a near pair is flagged."""
        a = make_record("a.jpg", "0f0f0f0f0f0f0f0f")
        b = make_record("b.jpg", "0f0f0f0f0f0f0f0e")

        marked = DuplicateDetector(config).mark_duplicates([a, b])

        assert "duplicate" not in marked[0].flags
        assert "duplicate" in marked[1].flags

    def test_input_records_not_mutated(self, config, make_record):
        records = [make_record("a.jpg"), make_record("b.jpg")]

        marked = DuplicateDetector(config).mark_duplicates(records)

        assert records[1].flags == ()
        assert marked[1].flags == ("duplicate",)
        assert marked[0] is records[0]

    def test_flag_added_once(self, config, make_record):
        """Test a record matching several earlier ones carries one flag."""
        records = [make_record(f"{i}.jpg") for i in range(4)]

        marked = DuplicateDetector(config).mark_duplicates(records)

        assert [r.flags.count("duplicate") for r in marked] == [0, 1, 1, 1]

    def test_already_flagged_record(self, config, make_record):
        records = [make_record("a.jpg"), make_record("b.jpg", flags=("duplicate",))]

        marked = DuplicateDetector(config).mark_duplicates(records)

        assert marked[1].flags == ("duplicate",)

    def test_flag_appended_after_quality_flags(self, config, make_record):
        records = [make_record("a.jpg"), make_record("b.jpg", flags=("blurry",))]

        marked = DuplicateDetector(config).mark_duplicates(records)

        assert marked[1].flags == ("blurry", "duplicate")

    def test_chained_near_duplicates(self, config, make_record):
        """Test each record is compared with every earlier one, flagged or not."""
        a = make_record("a.jpg", "0000000000000000")
        b = make_record("b.jpg", "000000000000000f")  # 4 from a
        c = make_record("c.jpg", "00000000000000ff")  # 4 from b, 8 from a

        marked = DuplicateDetector(config).mark_duplicates([a, b, c])

        assert [r.has_flag("duplicate") for r in marked] == [False, True, True]

    def test_distant_hashes_not_marked(self, config, make_record):
        records = [
            make_record("a.jpg", "0000000000000000"),
            make_record("b.jpg", "ffffffffffffffff"),
        ]

        marked = DuplicateDetector(config).mark_duplicates(records)

        assert not any(r.has_flag("duplicate") for r in marked)

    def test_index_used_for_large_batches(self, config, make_record):
        """Test the bucketed path gives the same flags."""
        config.processing.duplicate_index_min_batch = 2
        rng = random.Random(11)
        base = random_hash(rng)
        hashes = [base, random_hash(rng), flip_bits(base, 3, rng), flip_bits(base, 9, rng)]
        records = [make_record(f"{i}.jpg", h) for i, h in enumerate(hashes)]

        marked = DuplicateDetector(config).mark_duplicates(records)

        assert [r.has_flag("duplicate") for r in marked] == [False, False, True, False]
