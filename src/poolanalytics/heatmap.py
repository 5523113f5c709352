"""Liquidity/volume heatmap over the pool list.

Pools are bucketed into quintiles by liquidity (x) and 24h volume (y),
giving a fixed 5x5 grid. Every cell is always present, even when empty.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from src.poolanalytics.models.indexer import IndexerPool, IndexerPoolToken
from src.poolanalytics.models.views import HeatmapCell, HeatmapPoint, HeatmapResult
from src.poolanalytics.parsing import sum_numberish, to_number
from src.poolanalytics.quantile import bucket_edges, bucket_for

logger = logging.getLogger(__name__)

GRID_SIZE = 5

# Keys summed when the indexer reports volume_24h as an object
VOLUME_KEYS = ("token0", "token1", "volume0", "volume1", "total")


def parse_volume_like(value: Any) -> float:
    """Read a 24h volume that may be a scalar or a per-token object."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return to_number(value)
    if isinstance(value, Mapping):
        return sum_numberish(*(value.get(key) for key in VOLUME_KEYS))
    return 0.0


def _token_symbol(token: Optional[IndexerPoolToken], fallback: str) -> str:
    if token is None:
        return fallback
    if token.symbol:
        return token.symbol
    if token.address:
        return token.address[:4]
    return fallback


def _base_point(pool: IndexerPool) -> dict[str, Any]:
    reserves = pool.reserves
    liquidity_value = (
        to_number(reserves.token0) + to_number(reserves.token1) if reserves is not None else 0.0
    )
    volume_value = parse_volume_like(pool.volume_24h)
    token0_symbol = _token_symbol(pool.token0, "T0")
    token1_symbol = _token_symbol(pool.token1, "T1")

    return {
        "pool_address": pool.pair_address,
        "symbol": f"{token0_symbol}/{token1_symbol}",
        "token0_symbol": token0_symbol,
        "token1_symbol": token1_symbol,
        "liquidity_value": liquidity_value,
        "volume_value": volume_value,
        # +1 keeps a zero on one axis from collapsing the ranking
        "composite_score": (liquidity_value + 1) * (volume_value + 1),
    }


def build_heatmap(pools: Iterable[Union[IndexerPool, Mapping[str, Any]]]) -> HeatmapResult:
    """
    Bucket pools into the 5x5 liquidity/volume grid.

    Args:
        pools: Pool records (models or raw mappings); records without a
               pair address are skipped

    Returns:
        HeatmapResult with points and all 25 cells, both ordered by
        descending composite score
    """
    records = [IndexerPool.coerce(pool) for pool in pools]
    base_points = [_base_point(pool) for pool in records if pool.pair_address]

    liquidity_edges = bucket_edges([p["liquidity_value"] for p in base_points])
    volume_edges = bucket_edges([p["volume_value"] for p in base_points])

    points = [
        HeatmapPoint(
            **p,
            liquidity_bucket=bucket_for(liquidity_edges, p["liquidity_value"]),
            volume_bucket=bucket_for(volume_edges, p["volume_value"]),
        )
        for p in base_points
    ]

    grid: dict[tuple[int, int], list[HeatmapPoint]] = {
        (x, y): [] for y in range(GRID_SIZE) for x in range(GRID_SIZE)
    }
    for point in points:
        grid[(point.liquidity_bucket, point.volume_bucket)].append(point)

    max_count = max(1, *(len(members) for members in grid.values()))

    def by_score(point: HeatmapPoint) -> float:
        return point.composite_score

    cells = [
        HeatmapCell(
            x=x,
            y=y,
            pool_count=len(members),
            intensity=len(members) / max_count,
            pools=sorted(members, key=by_score, reverse=True),
        )
        for (x, y), members in grid.items()
    ]
    points.sort(key=by_score, reverse=True)

    logger.debug(f"Heatmap built from {len(points)}/{len(records)} pools")
    return HeatmapResult(points=points, cells=cells)
