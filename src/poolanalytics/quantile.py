"""Order statistics used to bucket and tier noisy indexer distributions."""

from typing import Optional, Sequence

import numpy as np

from src.poolanalytics.models.views import SizeTier, SpeedTier

BUCKET_QUANTILES = (0.2, 0.4, 0.6, 0.8)
SIZE_QUANTILES = (0.25, 0.5, 0.75)

FAST_SWAP_SECONDS = 45
SLOW_SWAP_SECONDS = 300


def quantile(values: Sequence[float], q: float) -> float:
    """Interpolated quantile (R-7, numpy's default 'linear' method).

    Args:
        values: Numeric sample, in any order (not modified)
        q: Quantile in [0, 1]

    Returns:
        The interpolated order statistic, or 0.0 for an empty sample
    """
    if len(values) == 0:
        return 0.0
    return float(np.quantile(np.asarray(values, dtype=float), q, method="linear"))


def _quantiles(values: Sequence[float], qs: Sequence[float]) -> list[float]:
    if len(values) == 0:
        return [0.0] * len(qs)
    return [float(v) for v in np.quantile(np.asarray(values, dtype=float), qs, method="linear")]


def bucket_edges(values: Sequence[float]) -> list[float]:
    """20/40/60/80th percentiles of the sample."""
    return _quantiles(values, BUCKET_QUANTILES)


def bucket_for(edges: Sequence[float], value: float) -> int:
    """Index of the first edge the value does not exceed (len(edges) if none)."""
    for index, edge in enumerate(edges):
        if value <= edge:
            return index
    return len(edges)


def to_bucket(values: Sequence[float], value: float) -> int:
    """Quintile bucket 0..4 of value within the sample; 0 for an empty sample."""
    if len(values) == 0:
        return 0
    return bucket_for(bucket_edges(values), value)


def size_tier(value: float, values: Sequence[float]) -> SizeTier:
    q25, q50, q75 = _quantiles(values, SIZE_QUANTILES)
    if value <= q25:
        return SizeTier.S
    if value <= q50:
        return SizeTier.M
    if value <= q75:
        return SizeTier.L
    return SizeTier.XL


def speed_tier(delta_seconds: Optional[float]) -> SpeedTier:
    # Absolute thresholds, independent of the batch
    if delta_seconds is None:
        return SpeedTier.NORMAL
    if delta_seconds < FAST_SWAP_SECONDS:
        return SpeedTier.FAST
    if delta_seconds > SLOW_SWAP_SECONDS:
        return SpeedTier.SLOW
    return SpeedTier.NORMAL
