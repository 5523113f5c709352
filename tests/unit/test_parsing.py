"""
Unit tests for tolerant value parsing.
"""

from datetime import datetime, timezone

import pytest

from src.poolanalytics.parsing import (
    EPOCH,
    clamp,
    parse_timestamp,
    pct_of,
    short_address,
    sum_numberish,
    timestamp_or_epoch,
    to_number,
)


class TestToNumber:
    """Test suite for numberish conversion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, 3.0),
            (2.5, 2.5),
            ("12.75", 12.75),
            (" -4 ", -4.0),
            ("1e3", 1000.0),
            ("", 0.0),
            ("abc", 0.0),
            (None, 0.0),
            (True, 0.0),
            ({"token0": 1}, 0.0),
            (float("nan"), 0.0),
            ("inf", 0.0),
        ],
    )
    def test_conversion(self, value, expected):
        assert to_number(value) == expected

    def test_sum_numberish(self):
        assert sum_numberish("1", 2, None, "x") == 3.0


class TestPercentages:
    def test_clamp(self):
        assert clamp(-1, 0, 100) == 0
        assert clamp(150, 0, 100) == 100
        assert clamp(42, 0, 100) == 42

    def test_pct_of(self):
        assert pct_of(25, 100) == 25.0
        assert pct_of(5, 0) == 0.0
        assert pct_of(5, -10) == 0.0
        assert pct_of(200, 100) == 100.0
        assert pct_of(float("nan"), 100) == 0.0


class TestTimestamps:
    """Test suite for timestamp parsing."""

    def test_zulu_suffix(self):
        assert parse_timestamp("2025-01-01T12:00:00Z") == datetime(
            2025, 1, 1, 12, tzinfo=timezone.utc
        )

    def test_offset_is_normalized_to_utc(self):
        parsed = parse_timestamp("2025-01-01T14:00:00+02:00")

        assert parsed == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)
        assert parsed.tzinfo == timezone.utc

    def test_naive_is_assumed_utc(self):
        assert parse_timestamp("2025-01-01T12:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None
        assert timestamp_or_epoch(value) == EPOCH


class TestShortAddress:
    def test_long_address_is_shortened(self):
        assert short_address("So11111111111111111111111111111111111111112") == "So11…1112"

    def test_short_value_unchanged(self):
        assert short_address("T0") == "T0"
        assert short_address("abcdefghijk") == "abcdefghijk"
