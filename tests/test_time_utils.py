"""Unit tests for time helpers."""

from datetime import datetime

import pytest

from photo_check.utils.time_utils import format_duration, normalize_exif_datetime, parse_exif_datetime


class TestExifDatetime:
    def test_parse(self):
        assert parse_exif_datetime("2023:05:01 10:20:30") == datetime(2023, 5, 1, 10, 20, 30)

    def test_parse_invalid(self):
        assert parse_exif_datetime("yesterday") is None

    def test_normalize(self):
        assert normalize_exif_datetime("2023:05:01 10:20:30") == "2023-05-01T10:20:30"

    def test_normalize_keeps_unparseable_text(self):
        assert normalize_exif_datetime(" 2023-05-01 ") == "2023-05-01"


class TestFormatDuration:
    @pytest.mark.parametrize(
        "seconds, expected", [(5, "5.0s"), (90, "1.5m"), (5400, "1.5h")]
    )
    def test_units(self, seconds, expected):
        assert format_duration(seconds) == expected
