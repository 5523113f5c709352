"""
Unit tests for composite borrow-risk scoring and snapshot derivation.
"""

from datetime import datetime, timezone

import pytest

from src.poolanalytics.models.indexer import IndexerLendingEvent
from src.poolanalytics.models.views import RiskLabel
from src.poolanalytics.risk import (
    NEUTRAL_MOMENTUM,
    build_risk_snapshot,
    compute_composite_risk_score,
    event_momentum,
    label_risk,
)


class TestCompositeRiskScore:
    """Test suite for compute_composite_risk_score."""

    def test_all_max_is_critical(self):
        result = compute_composite_risk_score(100, 100, 100)

        assert result.score == pytest.approx(100.0)
        assert result.label is RiskLabel.CRITICAL

    def test_all_zero_is_low(self):
        result = compute_composite_risk_score(0, 0, 0)

        assert result.score == 0.0
        assert result.label is RiskLabel.LOW

    def test_weights(self):
        result = compute_composite_risk_score(
            utilization_stress=50, debt_skew_stress=20, event_momentum_stress=50
        )

        assert result.score == pytest.approx(0.45 * 50 + 0.35 * 20 + 0.20 * 50)

    def test_inputs_clamped_independently(self):
        clamped = compute_composite_risk_score(250, -40, 1000)
        reference = compute_composite_risk_score(100, 0, 100)

        assert clamped.score == pytest.approx(reference.score)
        assert 0.0 <= clamped.score <= 100.0

    @pytest.mark.parametrize(
        "score, label",
        [
            (0, RiskLabel.LOW),
            (29.99, RiskLabel.LOW),
            (30, RiskLabel.MODERATE),
            (54.99, RiskLabel.MODERATE),
            (55, RiskLabel.HIGH),
            (74.99, RiskLabel.HIGH),
            (75, RiskLabel.CRITICAL),
            (100, RiskLabel.CRITICAL),
        ],
    )
    def test_label_thresholds(self, score, label):
        assert label_risk(score) is label


class TestEventMomentum:
    """Test suite for wallet lending momentum."""

    def test_no_events_is_neutral(self):
        momentum, last_event_at = event_momentum([])

        assert momentum == NEUTRAL_MOMENTUM
        assert last_event_at is None

    def test_only_borrows_is_max(self):
        events = [
            IndexerLendingEvent(event_type="borrow", event_timestamp="2025-01-01T00:00:00Z"),
            IndexerLendingEvent(amount0="5", event_timestamp="2025-01-02T00:00:00Z"),
        ]

        momentum, last_event_at = event_momentum(events)

        assert momentum == 100.0
        assert last_event_at == datetime(2025, 1, 2, tzinfo=timezone.utc)

    def test_only_repays_is_min(self):
        events = [IndexerLendingEvent(event_type="REPAY_TOKEN1", amount1=0)]

        momentum, _ = event_momentum(events)

        assert momentum == 0.0

    def test_event_can_count_both_ways(self):
        # Positive amount0 (borrow-like) and negative amount1 (repay-like)
        events = [IndexerLendingEvent(amount0=3, amount1=-1)]

        momentum, _ = event_momentum(events)

        assert momentum == 50.0

    def test_unparseable_timestamps_ignored_for_last_event(self):
        events = [IndexerLendingEvent(event_type="borrow", event_timestamp="yesterday")]

        _, last_event_at = event_momentum(events)

        assert last_event_at is None


class TestBuildRiskSnapshot:
    """Test suite for build_risk_snapshot."""

    def test_pool_scope_snapshot(self):
        positions = [
            {"collateralToken": "token0", "collateral": "200", "debtToken": "token1", "debtWithInterest": "30"},
            {"collateralToken": "token1", "collateral": 100, "debtToken": "token0", "debtShares": 10},
        ]
        pool_info = {"reserve0": "100", "reserve1": "60"}

        snapshot = build_risk_snapshot(positions, pool_info)

        # debt0 = 10 (10% of reserve0), debt1 = 30 (50% of reserve1)
        assert snapshot.scope_label == "Pool Snapshot"
        assert snapshot.utilization_pct == pytest.approx(50.0)
        assert snapshot.debt_skew_pct == pytest.approx(50.0)
        assert snapshot.borrow_pressure_pct == pytest.approx(40 / 160 * 100)
        assert snapshot.collateral_mix_token0_pct == pytest.approx(200 / 300 * 100)
        assert snapshot.collateral_mix_token1_pct == pytest.approx(100 / 300 * 100)
        assert snapshot.debt_mix_token0_pct == pytest.approx(25.0)
        assert snapshot.debt_mix_token1_pct == pytest.approx(75.0)
        assert snapshot.position_count == 2
        assert snapshot.event_momentum == NEUTRAL_MOMENTUM
        assert snapshot.risk_score == pytest.approx(0.45 * 50 + 0.35 * 50 + 0.20 * 50)
        assert snapshot.risk_label is RiskLabel.MODERATE
        assert snapshot.last_event_at is None

    def test_debt_with_interest_preferred_over_shares(self):
        positions = [{"debtToken": "token0", "debtWithInterest": "12", "debtShares": "10"}]

        snapshot = build_risk_snapshot(positions, {"reserve0": 100, "reserve1": 100})

        assert snapshot.utilization_pct == pytest.approx(12.0)

    def test_empty_pool(self):
        snapshot = build_risk_snapshot([], {})

        assert snapshot.utilization_pct == 0.0
        assert snapshot.borrow_pressure_pct == 0.0
        assert snapshot.debt_skew_pct == 0.0
        assert snapshot.collateral_mix_token0_pct == 0.0
        assert snapshot.debt_mix_token1_pct == 0.0
        assert snapshot.risk_score == pytest.approx(10.0)
        assert snapshot.risk_label is RiskLabel.LOW

    def test_percentages_clamped(self):
        positions = [{"debtToken": "token0", "debtWithInterest": 1_000}]

        snapshot = build_risk_snapshot(positions, {"reserve0": 10, "reserve1": 0})

        assert snapshot.utilization_pct == 100.0
        assert snapshot.borrow_pressure_pct == 100.0
        assert snapshot.debt_skew_pct == 100.0

    def test_wallet_scope_uses_momentum(self, sample_lending_events):
        # One borrow and one repay balance out
        snapshot = build_risk_snapshot(
            [], {"reserve0": 1, "reserve1": 1}, sample_lending_events, wallet_scoped=True
        )

        assert snapshot.scope_label == "Pool + Wallet Events"
        assert snapshot.event_momentum == 50.0
        assert snapshot.last_event_at == datetime(2025, 1, 1, 12, 0, 10, tzinfo=timezone.utc)

    def test_events_ignored_without_wallet_scope(self, sample_lending_events):
        snapshot = build_risk_snapshot([], {}, sample_lending_events, wallet_scoped=False)

        assert snapshot.event_momentum == NEUTRAL_MOMENTUM
        assert snapshot.last_event_at is None
