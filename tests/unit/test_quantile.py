"""
Unit tests for the quantile engine.
Covers interpolation, quintile bucketing and swap tiering.
"""

import pytest

from src.poolanalytics.models.views import SizeTier, SpeedTier
from src.poolanalytics.quantile import (
    bucket_edges,
    bucket_for,
    quantile,
    size_tier,
    speed_tier,
    to_bucket,
)


class TestQuantile:
    """Test suite for R-7 interpolated quantiles."""

    def test_empty_sample_is_zero(self):
        assert quantile([], 0.0) == 0.0
        assert quantile([], 0.5) == 0.0
        assert quantile([], 1.0) == 0.0

    def test_extremes_are_min_and_max(self):
        values = [7.0, -2.0, 13.5, 4.0]

        assert quantile(values, 0) == -2.0
        assert quantile(values, 1) == 13.5

    def test_linear_interpolation(self):
        # pos = (4 - 1) * 0.5 = 1.5 -> halfway between 2 and 3
        assert quantile([1, 2, 3, 4], 0.5) == pytest.approx(2.5)
        # pos = 3 * 0.25 = 0.75 -> 1 + 0.75 * (2 - 1)
        assert quantile([4, 3, 2, 1], 0.25) == pytest.approx(1.75)

    def test_single_value(self):
        assert quantile([42.0], 0.3) == 42.0

    def test_does_not_mutate_input(self):
        values = [3, 1, 2]

        quantile(values, 0.5)

        assert values == [3, 1, 2]


class TestBucketing:
    """Test suite for quintile buckets."""

    def test_empty_sample_is_bucket_zero(self):
        assert to_bucket([], 123.0) == 0
        assert to_bucket([], -5.0) == 0

    def test_buckets_span_zero_to_four(self):
        values = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]

        assert to_bucket(values, 1) == 0
        assert to_bucket(values, 10) == 4
        assert {to_bucket(values, v) for v in values} == {0, 1, 2, 3, 4}

    def test_value_on_edge_goes_to_lower_bucket(self):
        values = [0, 10, 20, 30, 40, 50]
        edges = bucket_edges(values)

        assert edges == pytest.approx([10.0, 20.0, 30.0, 40.0])
        assert to_bucket(values, 10) == 0
        assert to_bucket(values, 10.0001) == 1
        assert to_bucket(values, 40) == 3
        assert to_bucket(values, 41) == 4

    def test_identical_values_share_bucket_zero(self):
        values = [5.0, 5.0, 5.0]

        assert to_bucket(values, 5.0) == 0

    def test_bucket_for_above_all_edges(self):
        assert bucket_for([1.0, 2.0, 3.0, 4.0], 100.0) == 4


class TestTiers:
    """Test suite for swap size and speed tiers."""

    def test_size_tiers_by_quartile(self):
        values = [1, 2, 3, 4, 5, 6, 7, 8, 9]

        assert size_tier(1, values) is SizeTier.S
        assert size_tier(4, values) is SizeTier.M
        assert size_tier(7, values) is SizeTier.L
        assert size_tier(9, values) is SizeTier.XL

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (None, SpeedTier.NORMAL),
            (0, SpeedTier.FAST),
            (44.9, SpeedTier.FAST),
            (45, SpeedTier.NORMAL),
            (300, SpeedTier.NORMAL),
            (300.1, SpeedTier.SLOW),
        ],
    )
    def test_speed_tier_thresholds(self, delta, expected):
        assert speed_tier(delta) is expected
