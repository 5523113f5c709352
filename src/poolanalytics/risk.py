"""Composite borrow-risk scoring.

compute_composite_risk_score is the single scoring rule: three stress
signals in [0, 100] are blended with fixed weights and labelled.
build_risk_snapshot derives those signals from positions, reserves and
wallet lending events.
"""

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

from src.poolanalytics.models.indexer import (
    IndexerLendingEvent,
    IndexerPoolInfo,
    IndexerPosition,
)
from src.poolanalytics.models.views import BorrowRiskSnapshot, RiskLabel, RiskResult
from src.poolanalytics.parsing import clamp, parse_timestamp, pct_of, to_number


UTILIZATION_WEIGHT = 0.45
DEBT_SKEW_WEIGHT = 0.35
EVENT_MOMENTUM_WEIGHT = 0.20

NEUTRAL_MOMENTUM = 50.0

# Lower bounds, checked from the top
LABEL_THRESHOLDS = (
    (75.0, RiskLabel.CRITICAL),
    (55.0, RiskLabel.HIGH),
    (30.0, RiskLabel.MODERATE),
)


def label_risk(score: float) -> RiskLabel:
    for threshold, label in LABEL_THRESHOLDS:
        if score >= threshold:
            return label
    return RiskLabel.LOW


def compute_composite_risk_score(
    utilization_stress: float, debt_skew_stress: float, event_momentum_stress: float
) -> RiskResult:
    """
    Blend three stress signals into one bounded score.

    Args:
        utilization_stress: Debt-to-reserve utilization (0-100)
        debt_skew_stress: Imbalance of debt between the two tokens (0-100)
        event_momentum_stress: Borrow vs repay activity, 50 is neutral (0-100)

    Returns:
        RiskResult with score in [0, 100] and its label
    """
    utilization = clamp(utilization_stress, 0, 100)
    skew = clamp(debt_skew_stress, 0, 100)
    momentum = clamp(event_momentum_stress, 0, 100)

    score = clamp(
        utilization * UTILIZATION_WEIGHT
        + skew * DEBT_SKEW_WEIGHT
        + momentum * EVENT_MOMENTUM_WEIGHT,
        0,
        100,
    )
    return RiskResult(score=score, label=label_risk(score))


def event_momentum(
    lending_events: Iterable[IndexerLendingEvent],
) -> tuple[float, Optional[datetime]]:
    """
    Score borrow-like vs repay-like wallet activity around a neutral 50.

    An event counts as borrow-like when an amount is positive or its type
    mentions "borrow", and as repay-like when an amount is negative or its
    type mentions "repay". One event can count as both.

    Returns:
        (momentum in [0, 100], latest parseable event timestamp or None)
    """
    borrow_signals = 0
    repay_signals = 0
    last_event_at: Optional[datetime] = None

    for event in lending_events:
        event_at = parse_timestamp(event.event_timestamp)
        if event_at is not None and (last_event_at is None or event_at > last_event_at):
            last_event_at = event_at

        amount0 = to_number(event.amount0)
        amount1 = to_number(event.amount1)
        event_type = (event.event_type or "").lower()

        if amount0 > 0 or amount1 > 0 or "borrow" in event_type:
            borrow_signals += 1
        if amount0 < 0 or amount1 < 0 or "repay" in event_type:
            repay_signals += 1

    signal_count = borrow_signals + repay_signals
    if signal_count == 0:
        return NEUTRAL_MOMENTUM, last_event_at

    momentum = NEUTRAL_MOMENTUM + (borrow_signals - repay_signals) / signal_count * 50
    return clamp(momentum, 0, 100), last_event_at


def build_risk_snapshot(
    positions: Iterable[Union[IndexerPosition, Mapping[str, Any]]],
    pool_info: Union[IndexerPoolInfo, Mapping[str, Any]],
    lending_events: Iterable[Union[IndexerLendingEvent, Mapping[str, Any]]] = (),
    wallet_scoped: bool = False,
) -> BorrowRiskSnapshot:
    """
    Derive the borrow-risk snapshot for one pool.

    Args:
        positions: Open positions in the pool
        pool_info: Current pool reserves
        lending_events: The wallet's lending events in this pool
        wallet_scoped: Whether lending_events were loaded for a wallet;
                       momentum stays neutral otherwise

    Returns:
        BorrowRiskSnapshot with all percentages clamped to [0, 100]
    """
    position_records = [IndexerPosition.coerce(p) for p in positions]
    info = IndexerPoolInfo.coerce(pool_info)
    events = [IndexerLendingEvent.coerce(e) for e in lending_events]

    collateral0 = collateral1 = 0.0
    debt0 = debt1 = 0.0

    for position in position_records:
        collateral_value = to_number(position.collateral)
        debt_source = (
            position.debt_with_interest
            if position.debt_with_interest is not None
            else position.debt_shares
        )
        debt_value = to_number(debt_source)

        if position.collateral_token == "token1":
            collateral1 += collateral_value
        else:
            collateral0 += collateral_value

        if position.debt_token == "token1":
            debt1 += debt_value
        else:
            debt0 += debt_value

    reserve0 = to_number(info.reserve0)
    reserve1 = to_number(info.reserve1)

    utilization0 = debt0 / reserve0 * 100 if reserve0 > 0 else 0.0
    utilization1 = debt1 / reserve1 * 100 if reserve1 > 0 else 0.0
    utilization_pct = clamp(max(utilization0, utilization1), 0, 100)

    total_debt = debt0 + debt1
    total_collateral = collateral0 + collateral1
    total_reserves = reserve0 + reserve1

    debt_skew_pct = abs(debt0 - debt1) / total_debt * 100 if total_debt > 0 else 0.0
    borrow_pressure_pct = (
        total_debt / total_reserves * 100 if total_reserves > 0 else utilization_pct
    )

    if wallet_scoped:
        momentum, last_event_at = event_momentum(events)
    else:
        momentum, last_event_at = NEUTRAL_MOMENTUM, None

    risk = compute_composite_risk_score(
        utilization_stress=utilization_pct,
        debt_skew_stress=debt_skew_pct,
        event_momentum_stress=momentum,
    )

    return BorrowRiskSnapshot(
        scope_label="Pool + Wallet Events" if wallet_scoped else "Pool Snapshot",
        utilization_pct=utilization_pct,
        borrow_pressure_pct=clamp(borrow_pressure_pct, 0, 100),
        debt_skew_pct=clamp(debt_skew_pct, 0, 100),
        collateral_mix_token0_pct=pct_of(collateral0, total_collateral),
        collateral_mix_token1_pct=pct_of(collateral1, total_collateral),
        debt_mix_token0_pct=pct_of(debt0, total_debt),
        debt_mix_token1_pct=pct_of(debt1, total_debt),
        position_count=len(position_records),
        event_momentum=momentum,
        risk_score=risk.score,
        risk_label=risk.label,
        last_event_at=last_event_at,
    )
