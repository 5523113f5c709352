"""Pool price-performance series and summary stats."""

import math
from typing import Any, Mapping, Optional, Union

from src.poolanalytics.models.indexer import (
    IndexerFees,
    IndexerPriceChart,
    IndexerStats,
    IndexerVolume,
)
from src.poolanalytics.models.views import PerformanceSeriesPoint, PoolPerformanceStats
from src.poolanalytics.parsing import to_number


def build_performance_stats(
    window_hours: int,
    chart: Union[IndexerPriceChart, Mapping[str, Any]],
    volume: Optional[Union[IndexerVolume, Mapping[str, Any]]] = None,
    fees: Optional[Union[IndexerFees, Mapping[str, Any]]] = None,
    stats: Optional[Union[IndexerStats, Mapping[str, Any]]] = None,
) -> PoolPerformanceStats:
    """
    Summarize a price chart, with optional volume, fee and APR context.

    Samples without a positive finite price are dropped. Change is only
    reported once there are at least two samples.

    Args:
        window_hours: Requested window (24, 168 or 720)
        chart: Price chart payload (required)
        volume: Volume payload, None if unavailable
        fees: Fees payload, None if unavailable
        stats: Stats payload, None if unavailable (apr stays None)

    Returns:
        PoolPerformanceStats
    """
    chart = IndexerPriceChart.coerce(chart)
    volume = IndexerVolume.coerce(volume) if volume is not None else IndexerVolume()
    fees = IndexerFees.coerce(fees) if fees is not None else IndexerFees()

    series = [
        PerformanceSeriesPoint(time=point.bucket, value=to_number(point.avg_price))
        for point in chart.prices
    ]
    series = [point for point in series if math.isfinite(point.value) and point.value > 0]
    values = [point.value for point in series]

    latest = values[-1] if values else None
    first = values[0] if values else None
    change_pct = (latest - first) / first * 100 if len(values) >= 2 else None

    return PoolPerformanceStats(
        window_hours=window_hours,
        period=chart.period or f"{window_hours} hours",
        interval=chart.interval or "1 minute",
        series=series,
        latest_price=latest,
        first_price=first,
        change_pct=change_pct,
        high=max(values) if values else None,
        low=min(values) if values else None,
        volume0=to_number(volume.volume0),
        volume1=to_number(volume.volume1),
        fees0=to_number(fees.total_fee_paid_in_token0),
        fees1=to_number(fees.total_fee_paid_in_token1),
        apr=to_number(IndexerStats.coerce(stats).apr) if stats is not None else None,
    )
