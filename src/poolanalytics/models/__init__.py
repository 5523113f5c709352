"""Indexer record and derived view models."""

from src.poolanalytics.models.indexer import (
    IndexerFees,
    IndexerLendingEvent,
    IndexerLiquidityEvent,
    IndexerPool,
    IndexerPoolInfo,
    IndexerPosition,
    IndexerPriceChart,
    IndexerStats,
    IndexerSwap,
    IndexerVolume,
)
from src.poolanalytics.models.views import (
    BorrowRiskSnapshot,
    HeatmapCell,
    HeatmapPoint,
    HeatmapResult,
    PerformanceSeriesPoint,
    PoolPerformanceStats,
    RiskLabel,
    RiskResult,
    SizeTier,
    SpeedTier,
    SwapTapeItem,
)

__all__ = [
    "IndexerFees",
    "IndexerLendingEvent",
    "IndexerLiquidityEvent",
    "IndexerPool",
    "IndexerPoolInfo",
    "IndexerPosition",
    "IndexerPriceChart",
    "IndexerStats",
    "IndexerSwap",
    "IndexerVolume",
    "BorrowRiskSnapshot",
    "HeatmapCell",
    "HeatmapPoint",
    "HeatmapResult",
    "PerformanceSeriesPoint",
    "PoolPerformanceStats",
    "RiskLabel",
    "RiskResult",
    "SizeTier",
    "SpeedTier",
    "SwapTapeItem",
]
